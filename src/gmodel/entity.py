"""Entity graph for the gmodel kernel.

Every entity of a model is an :class:`Object`: points, curves, faces,
volumes, and the boundary aggregates (loops and shells) that bind them
together.  Objects reference lower level objects through two kinds of
edge:

- a *use* (:class:`Use`) is oriented and part of the boundary; its
  direction tells whether the target is traversed with or against its
  own parametrization;
- a *helper* is unoriented auxiliary data, such as the center of an
  arc, needed to rebuild the geometry but not part of the boundary.

A third list, ``embedded``, holds entities constrained to lie inside a
cell without bounding it.

The graph is a DAG and edges are append-only.  Objects compare and
hash by identity; the integer ``id`` is the external identity used in
all output and is drawn from the active
:class:`~gmodel.context.ModelContext`.

Copyright (c) 2025 Richard DeVaul
MIT License
"""

from enum import IntEnum
from typing import NamedTuple

from gmodel import geom
from gmodel.context import current_context
from gmodel.errors import TopologyError, entity_details


class Kind(IntEnum):
    """Entity kinds, in the numbering used by the mesher tooling."""
    POINT = 0
    LINE = 1
    ARC = 2
    ELLIPSE = 3
    SPLINE = 4
    PLANE = 5
    RULED = 6
    VOLUME = 7
    LOOP = 8
    SHELL = 9
    GROUP = 10

    @property
    def dim(self):
        return _DIMS[self]


_DIMS = {
    Kind.POINT: 0,
    Kind.LINE: 1,
    Kind.ARC: 1,
    Kind.ELLIPSE: 1,
    Kind.SPLINE: 1,
    Kind.PLANE: 2,
    Kind.RULED: 2,
    Kind.VOLUME: 3,
    Kind.LOOP: 0,
    Kind.SHELL: 0,
    Kind.GROUP: 0,
}

EDGE_KINDS = (Kind.LINE, Kind.ARC, Kind.ELLIPSE, Kind.SPLINE)
FACE_KINDS = (Kind.PLANE, Kind.RULED)


def is_entity(kind):
    """True for the geometric kinds, Point through Volume."""
    return kind <= Kind.VOLUME


def is_edge(kind):
    return kind in EDGE_KINDS


def is_face(kind):
    return kind in FACE_KINDS


def is_boundary(kind):
    """True for the boundary aggregates, Loop and Shell."""
    return kind in (Kind.LOOP, Kind.SHELL)


def boundary_kind(kind):
    """Return the aggregate kind that bounds a cell of ``kind``."""
    if is_face(kind):
        return Kind.LOOP
    if kind == Kind.VOLUME:
        return Kind.SHELL
    raise TopologyError("{} cells have no boundary aggregate".format(kind.name),
                        {'operation': 'boundary_kind', 'kind': kind.name})


class Direction(IntEnum):
    """Orientation of a use.  ``d ^ e`` composes two orientations and
    ``~d`` flips one."""
    FORWARD = 0
    REVERSE = 1

    def __xor__(self, other):
        return Direction(int(self) ^ int(other))

    __rxor__ = __xor__

    def __invert__(self):
        return Direction(1 - int(self))


FORWARD = Direction.FORWARD
REVERSE = Direction.REVERSE


class Use(NamedTuple):
    """An oriented reference from one object to another."""
    direction: Direction
    obj: "Object"


class Object:
    """A node of the entity graph."""

    def __init__(self, kind):
        self.kind = Kind(kind)
        self.id = current_context().allocate_id()
        self.used = []
        self.helpers = []
        self.embedded = []

    def __repr__(self):
        return "<{} {}>".format(self.kind.name, self.id)

    @property
    def dim(self):
        return self.kind.dim


class Point(Object):
    """A model vertex: a position and a target mesh size."""

    def __init__(self, pos=None, size=None):
        super().__init__(Kind.POINT)
        self.pos = geom.point(pos) if pos is not None else geom.point(0, 0, 0)
        self.size = current_context().default_size if size is None else float(size)

    def __repr__(self):
        return "<POINT {} {}>".format(self.id, geom.vstr(self.pos))


def new_object(kind):
    """Allocate a bare object of ``kind``.  Points should be made with
    :class:`Point` (or :func:`gmodel.construct.new_point`)."""
    if Kind(kind) == Kind.POINT:
        return Point()
    return Object(kind)


def add_use(by, direction, of):
    """Append an oriented edge from ``by`` to ``of``."""
    if of is by:
        raise TopologyError("an object cannot use itself",
                            entity_details('add_use', by))
    by.used.append(Use(Direction(direction), of))


def add_helper(to, helper):
    """Append an unoriented helper reference."""
    if helper is to:
        raise TopologyError("an object cannot be its own helper",
                            entity_details('add_helper', to))
    to.helpers.append(helper)


def embed(into, obj):
    """Constrain ``obj`` to lie inside the cell ``into`` without taking
    part in its boundary.  Only faces and volumes can host embedded
    entities."""
    host_ok = is_face(into.kind) or into.kind == Kind.VOLUME
    if not host_ok or not is_entity(obj.kind) or obj.dim >= into.dim:
        raise TopologyError(
            "cannot embed {} {} into {} {}".format(obj.kind.name, obj.id,
                                                   into.kind.name, into.id),
            entity_details('embed', into, embedded_id=obj.id))
    into.embedded.append(obj)


def used_direction(user, used):
    """Return the direction of the first use of ``used`` by ``user``."""
    for use in user.used:
        if use.obj is used:
            return use.direction
    raise TopologyError(
        "{} {} does not use {} {}".format(user.kind.name, user.id,
                                          used.kind.name, used.id),
        entity_details('used_direction', user, used_id=used.id))


def objects_used(user):
    """Return the targets of ``user``'s uses, in order."""
    return [use.obj for use in user.used]
