"""Constructors and accessors for gmodel entities.

Edges use their two endpoints (start first) and keep any construction
points as helpers:

==========  ==========================  ===========================
kind        uses                        helpers
==========  ==========================  ===========================
Line        start, end
Arc         start, end                  center
Ellipse     start, end                  center, major-axis point
Spline      start, end                  interior control points
==========  ==========================  ===========================

Faces use their boundary loops (outer loop first, holes REVERSE) and
volumes use their shells.

Copyright (c) 2025 Richard DeVaul
MIT License
"""

from gmodel import geom
from gmodel.xform import Rotation
from gmodel.entity import (
    Kind, Point, FORWARD, REVERSE, new_object, add_use, add_helper,
    is_face,
)
from gmodel.errors import TopologyError, entity_details


# -----------------------------------------------------------------------------
# Points
# -----------------------------------------------------------------------------

def new_point(pos=None, size=None):
    """Create a point at ``pos`` with target mesh size ``size`` (the
    context default when omitted)."""
    return Point(pos, size)


def new_points(vectors, size=None):
    return [new_point(v, size) for v in vectors]


# -----------------------------------------------------------------------------
# Edges
# -----------------------------------------------------------------------------

def new_line(start, end):
    line = new_object(Kind.LINE)
    add_use(line, FORWARD, start)
    add_use(line, FORWARD, end)
    return line


def new_line_span(origin, span):
    """Line from ``origin`` to ``origin + span``."""
    start = new_point(origin)
    end = new_point(geom.add(start.pos, span), start.size)
    return new_line(start, end)


def new_line_between(a, b):
    return new_line(new_point(a), new_point(b))


def new_arc(start, center, end):
    arc = new_object(Kind.ARC)
    add_use(arc, FORWARD, start)
    add_helper(arc, center)
    add_use(arc, FORWARD, end)
    return arc


def new_ellipse(start, center, major_pt, end):
    ellipse = new_object(Kind.ELLIPSE)
    add_use(ellipse, FORWARD, start)
    add_helper(ellipse, center)
    add_helper(ellipse, major_pt)
    add_use(ellipse, FORWARD, end)
    return ellipse


def new_spline(points):
    """Spline through ``points``; the first and last are its endpoints."""
    if len(points) < 2:
        raise TopologyError("a spline needs at least two points",
                            {'operation': 'new_spline', 'count': len(points)})
    spline = new_object(Kind.SPLINE)
    add_use(spline, FORWARD, points[0])
    for p in points[1:-1]:
        add_helper(spline, p)
    add_use(spline, FORWARD, points[-1])
    return spline


def new_spline_through(vectors):
    return new_spline(new_points(vectors))


def edge_point(edge, i):
    """Endpoint ``i`` (0 = start, 1 = end) of an edge."""
    return edge.used[int(i)].obj


def arc_center(arc):
    return arc.helpers[0]


def arc_normal(arc):
    """Unit normal of the plane of an arc, oriented by its start and end."""
    c = arc_center(arc).pos
    return geom.unit(geom.cross(geom.sub(edge_point(arc, 0).pos, c),
                                geom.sub(edge_point(arc, 1).pos, c)))


def ellipse_center(ellipse):
    return ellipse.helpers[0]


def ellipse_major_pt(ellipse):
    return ellipse.helpers[1]


def spline_points(spline):
    """All points of a spline in order: start, interior points, end."""
    return [edge_point(spline, 0)] + list(spline.helpers) + [edge_point(spline, 1)]


def entry_point(use):
    """The point a loop enters an edge use at."""
    return edge_point(use.obj, int(use.direction))


def exit_point(use):
    """The point a loop leaves an edge use at."""
    return edge_point(use.obj, 1 - int(use.direction))


# -----------------------------------------------------------------------------
# Loops
# -----------------------------------------------------------------------------

def new_loop():
    return new_object(Kind.LOOP)


def loop_points(loop):
    """The entry point of every use of ``loop``, in loop order."""
    return [entry_point(use) for use in loop.used]


def new_polyline(points):
    """Closed loop of lines through ``points``."""
    loop = new_loop()
    n = len(points)
    for i in range(n):
        add_use(loop, FORWARD, new_line(points[i], points[(i + 1) % n]))
    return loop


def new_polyline_from(vectors):
    return new_polyline(new_points(vectors))


def new_circle(center, normal, x):
    """Circle of four quarter arcs around ``normal``, starting at
    ``center + x``.  All arcs share one center point."""
    quarter = Rotation(normal, 90.0)
    center_point = new_point(center)
    x = geom.point(x)
    ring_points = []
    for i in range(4):
        ring_points.append(new_point(geom.add(center_point.pos, x)))
        x = quarter.mul(x)
    loop = new_loop()
    for i in range(4):
        arc = new_arc(ring_points[i], center_point, ring_points[(i + 1) % 4])
        add_use(loop, FORWARD, arc)
    return loop


def new_ellipse_loop(center, major, minor):
    """Ellipse of four quarter ellipses with semi-axes ``major`` and
    ``minor``, starting at ``center + major``."""
    center_point = new_point(center)
    c = center_point.pos
    ring_points = new_points([geom.add(c, major),
                              geom.add(c, minor),
                              geom.sub(c, major),
                              geom.sub(c, minor)])
    major_pt = ring_points[0]
    loop = new_loop()
    for i in range(4):
        e = new_ellipse(ring_points[i], center_point, major_pt,
                        ring_points[(i + 1) % 4])
        add_use(loop, FORWARD, e)
    return loop


# -----------------------------------------------------------------------------
# Faces
# -----------------------------------------------------------------------------

def new_plane(loop=None):
    plane = new_object(Kind.PLANE)
    if loop is not None:
        add_use(plane, FORWARD, loop)
    return plane


def new_ruled(loop=None):
    ruled = new_object(Kind.RULED)
    if loop is not None:
        add_use(ruled, FORWARD, loop)
    return ruled


def face_loop(face):
    """The outer boundary loop of a face."""
    return face.used[0].obj


def add_hole_to_face(face, loop):
    if not is_face(face.kind) or loop.kind != Kind.LOOP:
        raise TopologyError(
            "cannot add {} {} as a hole of {} {}".format(
                loop.kind.name, loop.id, face.kind.name, face.id),
            entity_details('add_hole_to_face', face, loop_id=loop.id))
    add_use(face, REVERSE, loop)


def plane_normal(plane, epsilon=1e-10):
    """Unit normal of a planar face, from its outer loop (Newell's
    method).  Follows the loop's orientation."""
    pts = [p.pos for p in loop_points(face_loop(plane))]
    n = [0.0, 0.0, 0.0, 1.0]
    for i, a in enumerate(pts):
        b = pts[(i + 1) % len(pts)]
        n[0] += (a[1] - b[1]) * (a[2] + b[2])
        n[1] += (a[2] - b[2]) * (a[0] + b[0])
        n[2] += (a[0] - b[0]) * (a[1] + b[1])
    if geom.mag(n) < epsilon:
        raise TopologyError("face {} has a degenerate outer loop".format(plane.id),
                            entity_details('plane_normal', plane))
    return geom.unit(n)


# -----------------------------------------------------------------------------
# Volumes and containers
# -----------------------------------------------------------------------------

def new_shell():
    return new_object(Kind.SHELL)


def new_volume(shell=None):
    volume = new_object(Kind.VOLUME)
    if shell is not None:
        add_use(volume, FORWARD, shell)
    return volume


def volume_shell(volume):
    """The outer shell of a volume."""
    return volume.used[0].obj


def new_group():
    return new_object(Kind.GROUP)


def add_to_group(group, obj):
    add_use(group, FORWARD, obj)
