"""Ready-made shapes built from the constructors and the extrusion engine.

Copyright (c) 2025 Richard DeVaul
MIT License
"""

from enum import IntEnum

from gmodel import geom
from gmodel.entity import FORWARD, REVERSE, add_use
from gmodel.construct import (
    new_point, new_arc, new_loop, new_line_span, new_plane, new_ruled,
    new_circle, new_ellipse_loop, new_polyline_from, new_shell, new_volume,
    volume_shell, arc_center, arc_normal, loop_points, entry_point,
    exit_point,
)
from gmodel.extrude import extrude_edge, extrude_face
from gmodel.errors import TopologyError, entity_details


class CubeFace(IntEnum):
    """Position of each face in the shell of :func:`new_cube`."""
    BOTTOM = 0
    TOP = 1
    FRONT = 2
    RIGHT = 3
    BACK = 4
    LEFT = 5


def new_square(origin, x, y):
    """Parallelogram spanned by ``x`` and ``y`` at ``origin``, oriented
    by ``x`` cross ``y``."""
    return extrude_edge(new_line_span(origin, x), y).middle


def new_disk(center, normal, x):
    return new_plane(new_circle(center, normal, x))


def new_elliptical_disk(center, major, minor):
    return new_plane(new_ellipse_loop(center, major, minor))


def new_polygon(vectors):
    return new_plane(new_polyline_from(vectors))


def new_cube(origin, x, y, z):
    """Parallelepiped spanned by ``x``, ``y`` and ``z``.  The faces of
    its shell are in :class:`CubeFace` order."""
    return extrude_face(new_square(origin, x, y), z).middle


def get_cube_face(cube, which):
    return volume_shell(cube).used[CubeFace(which)].obj


def make_hemisphere(circle, center, shell, direction):
    """Add a hemisphere capping ``circle`` to ``shell``.

    ``circle`` must be a loop of four quarter arcs around ``center``.
    The cap rises along the circle's normal for FORWARD and against it
    for REVERSE; each quarter becomes a ruled face bounded by its rim
    arc and two meridian arcs.
    """
    if len(circle.used) != 4:
        raise TopologyError(
            "hemisphere needs a circle of 4 arcs, loop {} has {}".format(
                circle.id, len(circle.used)),
            entity_details('make_hemisphere', circle, edges=len(circle.used)))
    normal = arc_normal(circle.used[0].obj)
    if direction == REVERSE:
        normal = geom.scale3(normal, -1.0)
    rim = loop_points(circle)
    radius = geom.dist(rim[0].pos, center.pos)
    cap = new_point(geom.add(center.pos, geom.scale3(normal, radius)))
    meridians = {p: new_arc(p, center, cap) for p in rim}
    for use in circle.used:
        rim_dir = use.direction ^ direction
        rim_use = use._replace(direction=rim_dir)
        loop = new_loop()
        add_use(loop, rim_dir, use.obj)
        add_use(loop, FORWARD, meridians[exit_point(rim_use)])
        add_use(loop, REVERSE, meridians[entry_point(rim_use)])
        add_use(shell, FORWARD, new_ruled(loop))


def new_sphere(center, normal, x):
    """Closed shell of two hemispheres sharing an equator."""
    circle = new_circle(center, normal, x)
    center_point = arc_center(circle.used[0].obj)
    shell = new_shell()
    make_hemisphere(circle, center_point, shell, FORWARD)
    make_hemisphere(circle, center_point, shell, REVERSE)
    return shell


def new_ball(center, normal, x):
    return new_volume(new_sphere(center, normal, x))
