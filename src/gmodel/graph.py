"""Whole-closure utilities: deep copy and rigid/affine transform.

Copyright (c) 2025 Richard DeVaul
MIT License
"""

import logging

from gmodel import geom
from gmodel.closure import closure
from gmodel.entity import Kind, Point, new_object, add_use, add_helper, embed
from gmodel.errors import TopologyError, entity_details
from gmodel.xform import Matrix

logger = logging.getLogger(__name__)


def _built_copy(index, copies, position, user, dependency):
    j = index[dependency]
    if j >= position:
        raise TopologyError(
            "{} {} precedes its dependency {} {} in closure order".format(
                user.kind.name, user.id, dependency.kind.name, dependency.id),
            entity_details('copy_closure', user, dependency_id=dependency.id))
    return copies[j]


def copy_closure(root):
    """Deep-copy ``root`` and everything it depends on.

    The copy is isomorphic to the original (uses with their directions,
    helpers and embedded entities, in the same order) and shares no
    object with it.  Copies are numbered from the active context.
    Returns the copy of ``root``.
    """
    order = closure(root, include_helpers=True, include_embedded=True)
    index = {obj: i for i, obj in enumerate(order)}
    copies = []
    for i, obj in enumerate(order):
        if obj.kind == Kind.POINT:
            dup = Point(list(obj.pos), obj.size)
        else:
            dup = new_object(obj.kind)
        for use in obj.used:
            add_use(dup, use.direction, _built_copy(index, copies, i, obj, use.obj))
        for helper in obj.helpers:
            add_helper(dup, _built_copy(index, copies, i, obj, helper))
        for e in obj.embedded:
            embed(dup, _built_copy(index, copies, i, obj, e))
        copies.append(dup)
    logger.debug("copied closure of %s %d (%d objects)",
                 root.kind.name, root.id, len(copies))
    return copies[index[root]]


def _as_matrix(linear):
    if isinstance(linear, Matrix):
        return linear
    rows = [list(r) for r in linear]
    if len(rows) != 3 or any(len(r) != 3 for r in rows):
        raise ValueError('linear part must be a Matrix or a 3x3 nested sequence')
    return Matrix([rows[0] + [0], rows[1] + [0], rows[2] + [0], [0, 0, 0, 1]])


def transform_closure(root, linear, translation=None):
    """Move every point of ``root``'s closure, helpers included:
    ``pos = linear * pos + translation``.

    ``linear`` is a :class:`~gmodel.xform.Matrix` or a 3x3 nested
    sequence of rows.  Only point positions change.
    """
    m = _as_matrix(linear)
    delta = geom.point(translation) if translation is not None else geom.point(0, 0, 0)
    count = 0
    for obj in closure(root, include_helpers=True, include_embedded=True):
        if obj.kind == Kind.POINT:
            obj.pos = geom.add(m.mul(obj.pos), delta)
            count += 1
    logger.debug("transformed %d points below %s %d", count, root.kind.name, root.id)
