"""Gmsh meshing of gmodel closures.

This module drives the Gmsh Python API on ``.geo`` files written by
:mod:`gmodel.io.geo`, which is the quickest way to check that a model
is something the mesher accepts.

Usage:
    from gmodel.mesher import GmshMesher, MeshHints

    with GmshMesher() as mesher:
        mesher.open_geo(Path("cube.geo"))
        mesher.generate_mesh(MeshHints(dimension=3))
        mesher.export_mesh(Path("cube.msh"))

Gmsh rejects entity tag 0, so models meant for meshing should be built
in a :class:`~gmodel.context.ModelContext` with ``first_id=1``.

Copyright (c) 2025 Richard DeVaul
MIT License
"""

from __future__ import annotations

import logging
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from gmodel.io.geo import write_geo

# Gmsh import with graceful fallback
try:
    import gmsh
    _GMSH_AVAILABLE = True
except ImportError:
    gmsh = None  # type: ignore
    _GMSH_AVAILABLE = False

logger = logging.getLogger(__name__)


def gmsh_available() -> bool:
    """Return True if Gmsh Python API is available."""
    return _GMSH_AVAILABLE


def require_gmsh() -> None:
    """Raise error if Gmsh is not available."""
    if not _GMSH_AVAILABLE:
        raise RuntimeError(
            "Gmsh Python API is not available. Install with "
            "`pip install gmodel[mesh]` or `conda install -c conda-forge gmsh`"
        )


@dataclass
class MeshHints:
    """Mesh generation hints for Gmsh.

    Point sizes written in the ``.geo`` file set the local element
    size; ``element_size_factor`` scales all of them.

    Attributes:
        dimension: Mesh dimension (1, 2 or 3)
        element_size_factor: Global multiplier on the point sizes
        algorithm_2d: 2D meshing algorithm (1=MeshAdapt, 2=Auto, 5=Delaunay, 6=Frontal-Delaunay)
        algorithm_3d: 3D meshing algorithm (1=Delaunay, 4=Frontal, 10=HXT)
        element_order: Element polynomial order (1=linear, 2=quadratic)
    """
    dimension: int = 3
    element_size_factor: float = 1.0
    algorithm_2d: int = 6  # Frontal-Delaunay
    algorithm_3d: int = 1  # Delaunay
    element_order: int = 1


@dataclass
class MeshStats:
    """Summary of a generated mesh."""
    nodes: int = 0
    elements: Dict[str, int] = field(default_factory=dict)

    @property
    def element_count(self) -> int:
        return sum(self.elements.values())


class GmshMesher:
    """Thin session wrapper around the Gmsh API."""

    def __init__(self, verbose: bool = False):
        require_gmsh()
        self._verbose = verbose
        self._initialized = False

    def initialize(self) -> None:
        """Initialize Gmsh (must be called before other operations)."""
        if self._initialized:
            return
        gmsh.initialize()
        gmsh.option.setNumber("General.Terminal", 1 if self._verbose else 0)
        self._initialized = True

    def finalize(self) -> None:
        """Finalize Gmsh and release resources."""
        if self._initialized:
            gmsh.finalize()
            self._initialized = False

    def __enter__(self) -> "GmshMesher":
        self.initialize()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.finalize()

    def _require_session(self) -> None:
        if not self._initialized:
            raise RuntimeError("GmshMesher not initialized. Call initialize() first.")

    def open_geo(self, path: Path) -> None:
        """Load a ``.geo`` file as the current model."""
        self._require_session()
        gmsh.open(str(path))
        logger.debug("gmsh loaded %s", path)

    def generate_mesh(self, hints: Optional[MeshHints] = None) -> None:
        self._require_session()
        hints = hints or MeshHints()
        gmsh.option.setNumber("Mesh.CharacteristicLengthFactor", hints.element_size_factor)
        gmsh.option.setNumber("Mesh.Algorithm", hints.algorithm_2d)
        gmsh.option.setNumber("Mesh.Algorithm3D", hints.algorithm_3d)
        gmsh.option.setNumber("Mesh.ElementOrder", hints.element_order)
        gmsh.model.mesh.generate(hints.dimension)

    def export_mesh(self, path: Path) -> Path:
        """Write the mesh; the format follows the file extension."""
        self._require_session()
        path = Path(path)
        gmsh.write(str(path))
        logger.info("wrote mesh to %s", path)
        return path

    def get_mesh_stats(self) -> MeshStats:
        self._require_session()
        stats = MeshStats()
        node_tags, _, _ = gmsh.model.mesh.getNodes()
        stats.nodes = len(node_tags)
        element_types, element_tags, _ = gmsh.model.mesh.getElements()
        for elem_type, tags in zip(element_types, element_tags):
            elem_name = gmsh.model.mesh.getElementProperties(elem_type)[0]
            stats.elements[elem_name] = len(tags)
        return stats


def mesh_geo(path: Path, hints: Optional[MeshHints] = None,
             output: Optional[Path] = None) -> MeshStats:
    """Mesh a ``.geo`` file, optionally writing the mesh to ``output``."""
    with GmshMesher() as mesher:
        mesher.open_geo(path)
        mesher.generate_mesh(hints)
        if output is not None:
            mesher.export_mesh(output)
        return mesher.get_mesh_stats()


def mesh_model(root: Any, hints: Optional[MeshHints] = None,
               output: Optional[Path] = None) -> MeshStats:
    """Write the closure of ``root`` to a temporary ``.geo`` file and
    mesh it."""
    require_gmsh()
    with tempfile.TemporaryDirectory() as tmp:
        geo_path = Path(tmp) / "model.geo"
        write_geo(root, geo_path)
        return mesh_geo(geo_path, hints, output)


__all__ = [
    "GmshMesher",
    "MeshHints",
    "MeshStats",
    "gmsh_available",
    "require_gmsh",
    "mesh_geo",
    "mesh_model",
]
