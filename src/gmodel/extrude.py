"""Extrusion engine: dimension-lifting sweeps.

Each operation takes an entity and a *motion* and returns an
:class:`Extruded` pair: the ``middle`` entity swept out (one dimension
higher) and the ``end`` entity, the input after being moved.  A motion
is either a translation vector or a callable mapping a point position
to its moved position; a translation is just the motion "add this
vector", so both forms build exactly the same topology.

Adjacent entities share their extrusions: the lateral line of a point
is built once for all edges meeting there, and the lateral face of an
edge once for all loops running along it.  That sharing is what makes
the swept boundary conformal.

Copyright (c) 2025 Richard DeVaul
MIT License
"""

import logging
from typing import NamedTuple

from gmodel import geom
from gmodel.xform import Translation
from gmodel.entity import (
    Kind, Object, Point, FORWARD, REVERSE, new_object, add_use,
    is_edge, is_face, objects_used,
)
from gmodel.construct import (
    new_line, new_arc, new_ellipse, new_spline, new_loop, new_plane,
    new_ruled, new_shell, new_volume, new_group, add_to_group,
    edge_point, arc_center, ellipse_center, ellipse_major_pt,
)
from gmodel.assembly import assembly_boundary
from gmodel.errors import TopologyError, entity_details

logger = logging.getLogger(__name__)


class Extruded(NamedTuple):
    """Result of an extrusion."""
    middle: Object
    end: Object


def as_transform(motion):
    """Return ``motion`` as a point transform."""
    if callable(motion):
        return motion
    return Translation(geom.point(motion)).mul


def _moved_copy(p, transform):
    return Point(transform(list(p.pos)), p.size)


# -----------------------------------------------------------------------------
# Points and edges
# -----------------------------------------------------------------------------

def extrude_point(start, motion):
    """Sweep a point into a line.  The end point keeps the start's size."""
    transform = as_transform(motion)
    end = _moved_copy(start, transform)
    middle = new_line(start, end)
    return Extruded(middle, end)


def extrude_points(points, motion):
    """Extrude each point once.  Returns a dict keyed by point."""
    transform = as_transform(motion)
    extrusions = {}
    for p in points:
        if p not in extrusions:
            extrusions[p] = extrude_point(p, transform)
    return extrusions


def _end_edge(start, transform, left_end, right_end):
    kind = start.kind
    if kind == Kind.LINE:
        return new_line(left_end, right_end)
    if kind == Kind.ARC:
        return new_arc(left_end, _moved_copy(arc_center(start), transform),
                       right_end)
    if kind == Kind.ELLIPSE:
        return new_ellipse(left_end,
                           _moved_copy(ellipse_center(start), transform),
                           _moved_copy(ellipse_major_pt(start), transform),
                           right_end)
    if kind == Kind.SPLINE:
        interior = [_moved_copy(h, transform) for h in start.helpers]
        return new_spline([left_end] + interior + [right_end])
    raise TopologyError("cannot extrude {} {} as an edge".format(kind.name, start.id),
                        entity_details('extrude_edge', start))


def extrude_edge(start, motion, left=None, right=None):
    """Sweep an edge into a face.

    ``left`` and ``right`` are the extrusions of the edge's start and
    end points; pass them in when they are shared with neighbouring
    edges, they are built here otherwise.  The face boundary runs
    along the start edge, up the right line, back along the end edge
    and down the left line, independent of how the edge is used by
    any enclosing loop.  Lines sweep to a ``Plane``, curved edges to a
    ``Ruled`` surface.
    """
    if not is_edge(start.kind):
        raise TopologyError("{} {} is not an edge".format(start.kind.name, start.id),
                            entity_details('extrude_edge', start))
    transform = as_transform(motion)
    if left is None:
        left = extrude_point(edge_point(start, 0), transform)
    if right is None:
        right = extrude_point(edge_point(start, 1), transform)

    loop = new_loop()
    add_use(loop, FORWARD, start)
    add_use(loop, FORWARD, right.middle)
    end = _end_edge(start, transform, left.end, right.end)
    add_use(loop, REVERSE, end)
    add_use(loop, REVERSE, left.middle)

    if start.kind == Kind.LINE:
        middle = new_plane(loop)
    else:
        middle = new_ruled(loop)
    return Extruded(middle, end)


def extrude_edges(edges, motion, point_extrusions):
    """Extrude each edge once, threading the shared point extrusions.
    Returns a dict keyed by edge."""
    transform = as_transform(motion)
    extrusions = {}
    for e in edges:
        if e not in extrusions:
            extrusions[e] = extrude_edge(e, transform,
                                         point_extrusions[edge_point(e, 0)],
                                         point_extrusions[edge_point(e, 1)])
    return extrusions


def _loop_edges(loops):
    edges = []
    seen = set()
    for loop in loops:
        for use in loop.used:
            if use.obj not in seen:
                seen.add(use.obj)
                edges.append(use.obj)
    return edges


def _edge_endpoints(edges):
    points = []
    seen = set()
    for e in edges:
        for p in (edge_point(e, 0), edge_point(e, 1)):
            if p not in seen:
                seen.add(p)
                points.append(p)
    return points


def _sweep_edges(edges, transform):
    point_extrusions = extrude_points(_edge_endpoints(edges), transform)
    return extrude_edges(edges, transform, point_extrusions)


# -----------------------------------------------------------------------------
# Loops
# -----------------------------------------------------------------------------

def _add_walls(loop, shell, shell_dir, edge_extrusions):
    for use in loop.used:
        add_use(shell, use.direction ^ shell_dir, edge_extrusions[use.obj].middle)


def _end_loop(loop, edge_extrusions):
    end = new_loop()
    for use in loop.used:
        add_use(end, use.direction, edge_extrusions[use.obj].end)
    return end


def extrude_loop(start, motion, shell=None, shell_dir=FORWARD,
                 edge_extrusions=None):
    """Sweep a loop into the lateral wall of a volume.

    The face swept by each edge is added to ``shell`` (a new shell when
    omitted) with the edge's direction in the loop composed with
    ``shell_dir``; the moved edges form the end loop, keeping the
    original directions.  The returned ``middle`` is the shell, which
    the caller usually goes on filling.
    """
    if start.kind != Kind.LOOP:
        raise TopologyError("{} {} is not a loop".format(start.kind.name, start.id),
                            entity_details('extrude_loop', start))
    transform = as_transform(motion)
    if shell is None:
        shell = new_shell()
    if edge_extrusions is None:
        edge_extrusions = _sweep_edges(_loop_edges([start]), transform)
    end = _end_loop(start, edge_extrusions)
    _add_walls(start, shell, shell_dir, edge_extrusions)
    return Extruded(shell, end)


# -----------------------------------------------------------------------------
# Faces
# -----------------------------------------------------------------------------

def extrude_face(face, motion, edge_extrusions=None, end_loops=None):
    """Sweep a face, holes included, into a volume.

    The volume's shell uses the start face REVERSE, the end face
    FORWARD and the lateral wall of every boundary loop, oriented by
    that loop's direction in the face so hole walls face inward.

    ``edge_extrusions`` and ``end_loops`` (a dict from start loop to end
    loop) let sibling faces share their sweeps.
    """
    if not is_face(face.kind):
        raise TopologyError("{} {} is not a face".format(face.kind.name, face.id),
                            entity_details('extrude_face', face))
    transform = as_transform(motion)
    if edge_extrusions is None:
        edge_extrusions = _sweep_edges(_loop_edges(objects_used(face)), transform)
    if end_loops is None:
        end_loops = {}

    end = new_object(face.kind)
    shell = new_shell()
    add_use(shell, REVERSE, face)
    add_use(shell, FORWARD, end)
    for use in face.used:
        loop = use.obj
        if loop not in end_loops:
            end_loops[loop] = _end_loop(loop, edge_extrusions)
        _add_walls(loop, shell, use.direction, edge_extrusions)
        add_use(end, use.direction, end_loops[loop])
    middle = new_volume(shell)
    logger.debug("extruded %s %d into volume %d", face.kind.name, face.id, middle.id)
    return Extruded(middle, end)


def extrude_face_group(face_group, motion):
    """Sweep a group of sibling faces into one volume each.

    Siblings may share boundary edges, e.g. a disk nested as the hole
    of an annulus.  The exposed boundary of the group is swept first,
    then the interface edges between siblings; each edge is swept only
    once, so an interface wall is a single face used with opposite
    directions by the two volumes it separates.

    Returns a group of volumes and a group of end faces, both in member
    order.
    """
    faces = objects_used(face_group)
    for f in faces:
        if not is_face(f.kind):
            raise TopologyError(
                "face group {} contains {} {}".format(face_group.id, f.kind.name, f.id),
                entity_details('extrude_face_group', face_group, member_id=f.id))
    transform = as_transform(motion)

    exposed = objects_used(assembly_boundary(face_group))
    loops = [loop for f in faces for loop in objects_used(f)]
    exposed_set = set(exposed)
    interface = [e for e in _loop_edges(loops) if e not in exposed_set]
    edge_extrusions = _sweep_edges(exposed + interface, transform)
    logger.debug("face group %d: %d exposed edges, %d interface edges",
                 face_group.id, len(exposed), len(interface))

    middle = new_group()
    end = new_group()
    end_loops = {}
    for f in faces:
        ext = extrude_face(f, transform, edge_extrusions, end_loops)
        add_to_group(middle, ext.middle)
        add_to_group(end, ext.end)
    return Extruded(middle, end)
