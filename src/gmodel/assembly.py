"""Assembly operations: nesting, welding and shared-boundary elimination.

None of these operations compute geometry.  They record adjacency for
the mesher: a REVERSE boundary use inside a host cell marks a hole or
void, and a face used with opposite directions by two volume shells is
the conformal interface between them.

Copyright (c) 2025 Richard DeVaul
MIT License
"""

import logging

from gmodel.entity import (
    Kind, REVERSE, new_object, add_use, used_direction, boundary_kind,
    is_edge, is_face,
)
from gmodel.construct import (
    add_hole_to_face, volume_shell, entry_point, exit_point,
)
from gmodel.errors import TopologyError, entity_details

logger = logging.getLogger(__name__)


def insert_into(host, guest):
    """Nest ``guest`` inside ``host`` as a hole (faces) or void
    (volumes): the guest's boundary aggregate becomes a REVERSE use of
    the host."""
    host_kind = boundary_kind(host.kind)
    guest_kind = boundary_kind(guest.kind)
    if host_kind != guest_kind or not guest.used:
        raise TopologyError(
            "cannot insert {} {} into {} {}".format(guest.kind.name, guest.id,
                                                    host.kind.name, host.id),
            entity_details('insert_into', host, guest_id=guest.id,
                           guest_kind=guest.kind.name))
    add_use(host, REVERSE, guest.used[0].obj)


def weld_volume_face_into(big_volume, small_volume, big_volume_face,
                          small_volume_face):
    """Fuse ``small_volume`` onto ``big_volume`` along a shared face.

    The small volume's face becomes a hole of the big volume's face and
    is added to the big volume's shell with the opposite of the
    direction the small volume's shell uses it with.
    """
    insert_into(big_volume_face, small_volume_face)
    direction = used_direction(volume_shell(small_volume), small_volume_face)
    add_use(volume_shell(big_volume), ~direction, small_volume_face)
    logger.debug("welded face %d of volume %d into face %d of volume %d",
                 small_volume_face.id, small_volume.id,
                 big_volume_face.id, big_volume.id)


def weld_half_shell_onto(volume, face, half_shell, direction):
    """Merge an open shell (a bulge or dimple) onto ``face`` of
    ``volume``.

    The rim of ``half_shell`` becomes a hole of ``face`` and the faces
    of ``half_shell`` join the volume's shell, composed with
    ``direction``.
    """
    rim = unscramble_loop(assembly_boundary(half_shell))
    add_hole_to_face(face, rim)
    shell = volume_shell(volume)
    for use in half_shell.used:
        add_use(shell, use.direction ^ direction, use.obj)
    logger.debug("welded %d faces of shell %d onto face %d of volume %d",
                 len(half_shell.used), half_shell.id, face.id, volume.id)


def assembly_boundary(assembly):
    """Collect the exposed boundary of a set of adjacent cells.

    ``assembly`` uses the member cells (a group, or a shell of faces).
    Every boundary element use of every member is counted, by identity;
    elements used by exactly one member are exposed and are gathered,
    in first-seen order, into a new loop (face members) or shell
    (volume members).  Elements used more than once are interfaces
    between members and are left out.

    Each exposed element keeps the orientation its member induces on
    it: its direction in its aggregate, composed with the aggregate's
    direction in the cell and the cell's direction in the assembly.
    """
    members = assembly.used
    if not members:
        raise TopologyError("assembly {} is empty".format(assembly.id),
                            entity_details('assembly_boundary', assembly))
    if all(is_face(use.obj.kind) for use in members):
        kind = Kind.LOOP
    elif all(use.obj.kind == Kind.VOLUME for use in members):
        kind = Kind.SHELL
    else:
        raise TopologyError(
            "assembly {} mixes cell kinds: {}".format(
                assembly.id, sorted({use.obj.kind.name for use in members})),
            entity_details('assembly_boundary', assembly))

    counts = {}
    directions = {}
    for member in members:
        for aggregate in member.obj.used:
            for element in aggregate.obj.used:
                obj = element.obj
                counts[obj] = counts.get(obj, 0) + 1
                if obj not in directions:
                    directions[obj] = (element.direction ^ aggregate.direction
                                       ^ member.direction)

    boundary = new_object(kind)
    for obj, direction in directions.items():
        if counts[obj] == 1:
            add_use(boundary, direction, obj)
    logger.debug("assembly %d: %d of %d boundary elements exposed",
                 assembly.id, len(boundary.used), len(counts))
    return boundary


def unscramble_loop(loop):
    """Reorder the uses of ``loop`` in place so that each use starts
    where the previous one ends.  Returns the loop.

    Raises
    ------
    TopologyError
        If the uses do not form one closed chain.
    """
    if loop.kind != Kind.LOOP or not all(is_edge(u.obj.kind) for u in loop.used):
        raise TopologyError("{} {} is not a loop of edges".format(loop.kind.name, loop.id),
                            entity_details('unscramble_loop', loop))
    remaining = list(loop.used)
    if not remaining:
        return loop
    ordered = [remaining.pop(0)]
    while remaining:
        tail = exit_point(ordered[-1])
        for i, use in enumerate(remaining):
            if entry_point(use) is tail:
                ordered.append(remaining.pop(i))
                break
        else:
            raise TopologyError(
                "loop {} breaks at point {}".format(loop.id, tail.id),
                entity_details('unscramble_loop', loop, point_id=tail.id))
    if exit_point(ordered[-1]) is not entry_point(ordered[0]):
        raise TopologyError("loop {} is not closed".format(loop.id),
                            entity_details('unscramble_loop', loop))
    loop.used[:] = ordered
    return loop
