# -*- coding: utf-8 -*-
"""gmodel: procedural boundary-representation models for Gmsh.

Build a model out of points, curves, faces and volumes, sweep and weld
them together, and write the closure of any entity to ``.geo`` or
``.dmg`` text.
"""

import logging
import sys
from typing import Optional

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("gmodel")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"

from gmodel.errors import (
    GModelError, TopologyError, EllipseError, ConfigError, ExportError,
)
from gmodel.context import ModelContext, current_context, use_context, load_config
from gmodel.entity import (
    Kind, Direction, FORWARD, REVERSE, Use, Object, Point,
    is_entity, is_edge, is_face, is_boundary, boundary_kind,
    new_object, add_use, add_helper, embed, used_direction, objects_used,
)
from gmodel.closure import (
    closure, filter_by_dim, filter_points, count_of_kind, count_of_dim,
)
from gmodel.construct import (
    new_point, new_points, new_line, new_line_span, new_line_between,
    new_arc, new_ellipse, new_spline, new_spline_through,
    edge_point, arc_center, arc_normal, ellipse_center, ellipse_major_pt,
    spline_points, entry_point, exit_point,
    new_loop, loop_points, new_polyline, new_polyline_from, new_circle,
    new_ellipse_loop, new_plane, new_ruled, face_loop, add_hole_to_face,
    plane_normal, new_shell, new_volume, volume_shell, new_group,
    add_to_group,
)
from gmodel.assembly import (
    insert_into, weld_volume_face_into, weld_half_shell_onto,
    assembly_boundary, unscramble_loop,
)
from gmodel.extrude import (
    Extruded, extrude_point, extrude_points, extrude_edge, extrude_edges,
    extrude_loop, extrude_face, extrude_face_group,
)
from gmodel.shapes import (
    CubeFace, new_square, new_disk, new_elliptical_disk, new_polygon,
    new_cube, get_cube_face, make_hemisphere, new_sphere, new_ball,
)
from gmodel.graph import copy_closure, transform_closure
from gmodel.evaluate import evaluate
from gmodel.io import format_geo, write_geo, format_dmg, write_dmg


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """Send records of the ``gmodel`` loggers to stderr (and optionally
    a file).  Replaces any handlers installed by an earlier call."""
    logger = logging.getLogger("gmodel")
    logger.setLevel(level)
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
