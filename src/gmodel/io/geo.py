"""Gmsh ``.geo`` export for gmodel closures."""

from __future__ import annotations

import logging
from typing import List

from gmodel.closure import closure
from gmodel.construct import (
    edge_point, arc_center, ellipse_center, ellipse_major_pt, spline_points,
)
from gmodel.entity import Kind, REVERSE, is_boundary, is_face
from gmodel.io._stream import open_for_writing

logger = logging.getLogger(__name__)

GEO_NAMES = {
    Kind.POINT: "Point",
    Kind.LINE: "Line",
    Kind.ARC: "Circle",
    Kind.ELLIPSE: "Ellipse",
    Kind.SPLINE: "Spline",
    Kind.PLANE: "Plane Surface",
    Kind.RULED: "Ruled Surface",
    Kind.VOLUME: "Volume",
    Kind.LOOP: "Line Loop",
    Kind.SHELL: "Surface Loop",
}

PHYSICAL_NAMES = {
    Kind.POINT: "Physical Point",
    Kind.LINE: "Physical Line",
    Kind.ARC: "Physical Line",
    Kind.ELLIPSE: "Physical Line",
    Kind.PLANE: "Physical Surface",
    Kind.RULED: "Physical Surface",
    Kind.VOLUME: "Physical Volume",
}

# name of an embedded entity, by dimension
_EMBEDDED_NAMES = {0: "Point", 1: "Line", 2: "Surface"}


def _ids(values) -> str:
    return ",".join(str(v) for v in values)


def geo_record(obj) -> List[str]:
    """Return the ``.geo`` statements declaring ``obj`` (none for groups)."""
    kind = obj.kind
    if kind == Kind.GROUP:
        return []
    name = GEO_NAMES[kind]
    if kind == Kind.POINT:
        x, y, z = obj.pos[0], obj.pos[1], obj.pos[2]
        return ["%s(%d) = {%f,%f,%f,%f};" % (name, obj.id, x, y, z, obj.size)]
    if kind == Kind.ARC:
        refs = [edge_point(obj, 0).id, arc_center(obj).id, edge_point(obj, 1).id]
    elif kind == Kind.ELLIPSE:
        refs = [edge_point(obj, 0).id, ellipse_center(obj).id,
                ellipse_major_pt(obj).id, edge_point(obj, 1).id]
    elif kind == Kind.SPLINE:
        refs = [p.id for p in spline_points(obj)]
    elif is_boundary(kind):
        refs = [-u.obj.id if u.direction == REVERSE else u.obj.id for u in obj.used]
    else:
        refs = [u.obj.id for u in obj.used]
    lines = ["%s(%d) = {%s};" % (name, obj.id, _ids(refs))]

    host = "Surface" if is_face(kind) else "Volume"
    for e in obj.embedded:
        lines.append("%s{%d} In %s{%d};" % (_EMBEDDED_NAMES[e.dim], e.id, host, obj.id))
    return lines


def physical_record(obj) -> List[str]:
    name = PHYSICAL_NAMES.get(obj.kind)
    if name is None:
        return []
    return ["%s(%d) = {%d};" % (name, obj.id, obj.id)]


def format_geo(root) -> str:
    """Render the closure of ``root`` as ``.geo`` text.

    Every object reachable from ``root`` (helpers and embedded entities
    included) is declared after everything it refers to, then each
    geometric entity reachable through uses gets a physical tag equal
    to its own id.
    """
    lines: List[str] = []
    for obj in closure(root, include_helpers=True, include_embedded=True):
        lines.extend(geo_record(obj))
    for obj in closure(root, include_helpers=False, include_embedded=True):
        lines.extend(physical_record(obj))
    return "".join(line + "\n" for line in lines)


def write_geo(root, path_or_file) -> None:
    """Write the closure of ``root`` to a ``.geo`` file or text stream.

    Raises
    ------
    ExportError
        If the file cannot be written.
    """
    text = format_geo(root)
    with open_for_writing(path_or_file) as stream:
        stream.write(text)
    logger.info("wrote %s %d to %s", root.kind.name, root.id,
                getattr(path_or_file, 'name', path_or_file))
