"""Exceptions raised by the gmodel kernel.

Usage errors (a malformed model built by incorrect client logic) are
raised as :class:`TopologyError` at the point of detection, with a
``details`` dictionary naming the operation and the entity involved.
Nothing in the kernel catches them.

Copyright (c) 2025 Richard DeVaul
MIT License
"""


class GModelError(Exception):
    """Base class for all gmodel errors."""


class TopologyError(GModelError, ValueError):
    """A contract on the entity graph was violated."""

    def __init__(self, message, details=None):
        super().__init__(message)
        self.details = details or {}


class EllipseError(TopologyError):
    """An ellipse arc is not a quarter ellipse."""


class ConfigError(GModelError, ValueError):
    """A model configuration file is malformed."""


class ExportError(GModelError, OSError):
    """A model could not be written to disk."""

    def __init__(self, message, path=None, cause=None):
        super().__init__(message)
        self.path = path
        self.cause = cause


def entity_details(operation, obj, **extra):
    """Build the ``details`` dictionary for a :class:`TopologyError`."""
    details = {'operation': operation}
    if obj is not None:
        details['id'] = obj.id
        details['kind'] = obj.kind.name
    details.update(extra)
    return details
