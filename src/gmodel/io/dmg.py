"""``.dmg`` model export for gmodel closures.

The format lists entity counts by dimension, two reserved lines, then
one record per entity, dependencies first::

    nVolumes nFaces nEdges nPoints
    0 0 0
    0 0 0
    id x y z                      (points)
    id p0 p1                      (edges)
    id nAggregates                (faces and volumes)
     nElements                    (per boundary aggregate)
      elementId flag              (per element, flag = 1 for FORWARD)
"""

from __future__ import annotations

import logging
from typing import List

from gmodel.closure import closure, count_of_dim
from gmodel.construct import edge_point
from gmodel.entity import Kind, is_edge, is_face
from gmodel.io._stream import open_for_writing

logger = logging.getLogger(__name__)


def dmg_record(obj) -> List[str]:
    """Return the ``.dmg`` lines for ``obj``; aggregates and groups
    have none of their own."""
    kind = obj.kind
    if kind == Kind.POINT:
        return ["%d %f %f %f" % (obj.id, obj.pos[0], obj.pos[1], obj.pos[2])]
    if is_edge(kind):
        return ["%d %d %d" % (obj.id, edge_point(obj, 0).id, edge_point(obj, 1).id)]
    if is_face(kind) or kind == Kind.VOLUME:
        lines = ["%d %d" % (obj.id, len(obj.used))]
        for aggregate in obj.used:
            lines.append(" %d" % len(aggregate.obj.used))
            for use in aggregate.obj.used:
                lines.append("  %d %d" % (use.obj.id, int(~use.direction)))
        return lines
    return []


def format_dmg(root) -> str:
    """Render the closure of ``root`` (uses only) as ``.dmg`` text."""
    objs = closure(root, include_helpers=False)
    lines = ["%d %d %d %d" % (count_of_dim(objs, 3), count_of_dim(objs, 2),
                              count_of_dim(objs, 1), count_of_dim(objs, 0)),
             "0 0 0",
             "0 0 0"]
    for obj in objs:
        lines.extend(dmg_record(obj))
    return "".join(line + "\n" for line in lines)


def write_dmg(root, path_or_file) -> None:
    """Write the closure of ``root`` to a ``.dmg`` file or text stream.

    Raises
    ------
    ExportError
        If the file cannot be written.
    """
    text = format_dmg(root)
    with open_for_writing(path_or_file) as stream:
        stream.write(text)
    logger.info("wrote %s %d to %s", root.kind.name, root.id,
                getattr(path_or_file, 'name', path_or_file))
