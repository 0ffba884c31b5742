"""Model sessions: id numbering and default sizes.

Every entity takes its id from the active :class:`ModelContext`.  A
process-wide default context is always active; :func:`use_context`
installs another one for the duration of a ``with`` block so that
several independent models can be built side by side.

Copyright (c) 2025 Richard DeVaul
MIT License
"""

from __future__ import annotations

import contextlib
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Iterator, Optional

from gmodel.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_SIZE = 0.1
DEFAULT_TOLERANCE = 1e-6


@dataclass
class ModelContext:
    """Numbering and defaults for one model session.

    Attributes:
        default_size: Target mesh size given to points created without
            an explicit size.
        tolerance: Tolerance for the parallel/perpendicular tests of the
            curve evaluator.
        first_id: Id handed to the first entity after a reset.
    """
    default_size: float = DEFAULT_SIZE
    tolerance: float = DEFAULT_TOLERANCE
    first_id: int = 0

    def __post_init__(self) -> None:
        self.next_id = self.first_id
        self.created = 0

    def allocate_id(self) -> int:
        oid = self.next_id
        self.next_id += 1
        self.created += 1
        return oid

    def reset(self) -> None:
        """Restart numbering at ``first_id``."""
        self.next_id = self.first_id
        self.created = 0


_default_context = ModelContext()
_active: list = [_default_context]


def current_context() -> ModelContext:
    """Return the context new entities are numbered from."""
    return _active[-1]


@contextlib.contextmanager
def use_context(ctx: Optional[ModelContext] = None) -> Iterator[ModelContext]:
    """Make ``ctx`` (or a fresh context) active inside a ``with`` block."""
    if ctx is None:
        ctx = ModelContext()
    _active.append(ctx)
    try:
        yield ctx
    finally:
        _active.pop()


def load_config(path: Path | str) -> ModelContext:
    """Build a :class:`ModelContext` from a YAML file.

    The file is a mapping with any of the keys ``default_size``,
    ``tolerance`` and ``first_id``.
    """
    import yaml

    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fp:
            data = yaml.safe_load(fp) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"{path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping, got {type(data).__name__}")

    known = {f.name: f.type for f in fields(ModelContext)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ConfigError(f"{path}: unknown configuration keys: {', '.join(unknown)}")

    try:
        kwargs = {
            'default_size': float(data.get('default_size', DEFAULT_SIZE)),
            'tolerance': float(data.get('tolerance', DEFAULT_TOLERANCE)),
            'first_id': int(data.get('first_id', 0)),
        }
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{path}: {exc}") from exc
    if kwargs['default_size'] <= 0.0:
        raise ConfigError(f"{path}: default_size must be positive")
    if kwargs['tolerance'] <= 0.0:
        raise ConfigError(f"{path}: tolerance must be positive")
    if kwargs['first_id'] < 0:
        raise ConfigError(f"{path}: first_id must not be negative")

    logger.debug("loaded model configuration from %s: %s", path, kwargs)
    return ModelContext(**kwargs)
