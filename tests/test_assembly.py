"""Tests for insertion, welding and assembly boundaries."""

import random

import pytest

from gmodel.assembly import (
    insert_into, weld_volume_face_into, weld_half_shell_onto,
    assembly_boundary, unscramble_loop,
)
from gmodel.closure import closure, count_of_kind
from gmodel.construct import (
    new_point, new_points, new_line, new_loop, new_plane, new_shell,
    new_circle, new_group, add_to_group, face_loop, volume_shell,
    entry_point, exit_point,
)
from gmodel.entity import Kind, FORWARD, REVERSE, Use, add_use, used_direction
from gmodel.errors import TopologyError
from gmodel.shapes import (
    CubeFace, new_cube, new_square, get_cube_face, make_hemisphere,
)


def _unit_cube(origin=(0, 0, 0), side=1.0):
    return new_cube(list(origin), [side, 0, 0], [0, side, 0], [0, 0, side])


def _chains(loop):
    uses = loop.used
    return all(exit_point(uses[i]) is entry_point(uses[(i + 1) % len(uses)])
               for i in range(len(uses)))


class TestInsert:
    """Test nesting of holes and voids."""

    def test_cube_in_cube(self):
        outer = _unit_cube()
        inner = _unit_cube((1 / 3.0, 1 / 3.0, 1 / 3.0), 1 / 3.0)
        insert_into(outer, inner)
        assert outer.used[1] == Use(REVERSE, volume_shell(inner))
        objs = closure(outer)
        assert count_of_kind(objs, Kind.VOLUME) == 1
        assert count_of_kind(objs, Kind.SHELL) == 2

    def test_disk_in_square(self):
        square = new_square([-2, -2, 0], [4, 0, 0], [0, 4, 0])
        disk = new_plane(new_circle([0, 0, 0], [0, 0, 1], [1, 0, 0]))
        insert_into(square, disk)
        assert square.used[1] == Use(REVERSE, face_loop(disk))

    def test_mismatched_kinds(self):
        with pytest.raises(TopologyError):
            insert_into(_unit_cube(), new_square([0, 0, 0], [1, 0, 0], [0, 1, 0]))

    def test_guest_without_boundary(self):
        with pytest.raises(TopologyError):
            insert_into(new_square([0, 0, 0], [1, 0, 0], [0, 1, 0]), new_plane())


class TestWeld:
    """Test welding volumes together."""

    def test_weld_volume_face(self):
        big = _unit_cube()
        small = _unit_cube((0.25, 0.25, 1.0), 0.5)
        big_top = get_cube_face(big, CubeFace.TOP)
        small_bottom = get_cube_face(small, CubeFace.BOTTOM)
        weld_volume_face_into(big, small, big_top, small_bottom)

        assert big_top.used[1] == Use(REVERSE, face_loop(small_bottom))
        big_dir = used_direction(volume_shell(big), small_bottom)
        small_dir = used_direction(volume_shell(small), small_bottom)
        assert big_dir == ~small_dir
        assert big_dir == FORWARD

    def test_weld_half_shell_dimple(self):
        cube = _unit_cube()
        bottom = get_cube_face(cube, CubeFace.BOTTOM)
        circle = new_circle([0.5, 0.5, 0], [0, 0, 1], [0.25, 0, 0])
        half = new_shell()
        make_hemisphere(circle, new_point([0.5, 0.5, 0]), half, FORWARD)
        shell = volume_shell(cube)
        before = len(shell.used)
        weld_half_shell_onto(cube, bottom, half, REVERSE)

        assert len(shell.used) == before + 4
        assert all(u.direction == REVERSE for u in shell.used[before:])
        assert len(bottom.used) == 2
        rim_use = bottom.used[1]
        assert rim_use.direction == REVERSE
        rim = rim_use.obj
        assert len(rim.used) == 4
        assert {u.obj for u in rim.used} == {u.obj for u in circle.used}
        assert _chains(rim)


class TestAssemblyBoundary:
    """Test shared-element elimination."""

    def test_two_squares_sharing_an_edge(self):
        a, b, c, d, e, f = new_points([[0, 0, 0], [1, 0, 0], [1, 1, 0],
                                       [0, 1, 0], [2, 0, 0], [2, 1, 0]])
        shared = new_line(b, c)
        left = new_loop()
        for edge in (new_line(a, b), shared, new_line(c, d), new_line(d, a)):
            add_use(left, FORWARD, edge)
        right = new_loop()
        add_use(right, FORWARD, new_line(b, e))
        add_use(right, FORWARD, new_line(e, f))
        add_use(right, FORWARD, new_line(f, c))
        add_use(right, REVERSE, shared)
        group = new_group()
        add_to_group(group, new_plane(left))
        add_to_group(group, new_plane(right))

        boundary = assembly_boundary(group)
        assert boundary.kind == Kind.LOOP
        edges = [u.obj for u in boundary.used]
        assert shared not in edges
        assert len(edges) == 6
        assert len(set(edges)) == 6
        # first-seen order: the left square's edges come first
        assert edges[:3] == [left.used[0].obj, left.used[2].obj, left.used[3].obj]
        assert _chains(unscramble_loop(boundary))

    def test_direction_composition(self):
        """A hole edge used FORWARD in a REVERSE loop comes out REVERSE,
        and a REVERSE member flips it back."""
        hole = new_circle([0, 0, 0], [0, 0, 1], [1, 0, 0])
        face = new_plane()
        add_use(face, REVERSE, hole)
        group = new_group()
        add_to_group(group, face)
        assert all(u.direction == REVERSE for u in assembly_boundary(group).used)

        flipped = new_group()
        add_use(flipped, REVERSE, face)
        assert all(u.direction == FORWARD for u in assembly_boundary(flipped).used)

    def test_volumes_give_shell(self):
        a = _unit_cube()
        b = _unit_cube((2, 0, 0))
        group = new_group()
        add_to_group(group, a)
        add_to_group(group, b)
        boundary = assembly_boundary(group)
        assert boundary.kind == Kind.SHELL
        assert len(boundary.used) == 12

    def test_welded_volumes_share_one_face(self):
        big = _unit_cube()
        small = _unit_cube((0.25, 0.25, 1.0), 0.5)
        small_bottom = get_cube_face(small, CubeFace.BOTTOM)
        weld_volume_face_into(big, small, get_cube_face(big, CubeFace.TOP), small_bottom)
        group = new_group()
        add_to_group(group, big)
        add_to_group(group, small)
        faces = [u.obj for u in assembly_boundary(group).used]
        assert small_bottom not in faces
        assert len(faces) == 6 + 5

    def test_mixed_members_rejected(self):
        group = new_group()
        add_to_group(group, _unit_cube())
        add_to_group(group, new_square([0, 0, 0], [1, 0, 0], [0, 1, 0]))
        with pytest.raises(TopologyError):
            assembly_boundary(group)

    def test_empty_rejected(self):
        with pytest.raises(TopologyError):
            assembly_boundary(new_group())


class TestUnscramble:
    """Test loop reordering."""

    def test_restores_chain(self):
        loop = new_circle([0, 0, 0], [0, 0, 1], [1, 0, 0])
        uses = list(loop.used)
        scrambled = new_loop()
        for i in (2, 0, 3, 1):
            add_use(scrambled, uses[i].direction, uses[i].obj)
        unscramble_loop(scrambled)
        assert _chains(scrambled)
        assert scrambled.used[0] == uses[2]
        assert set(scrambled.used) == set(uses)

    def test_random_polygon(self):
        rng = random.Random(7)
        loop = new_loop()
        pts = new_points([[i, i * i, 0] for i in range(8)])
        uses = [Use(FORWARD, new_line(pts[i], pts[(i + 1) % 8])) for i in range(8)]
        rng.shuffle(uses)
        for use in uses:
            add_use(loop, use.direction, use.obj)
        unscramble_loop(loop)
        assert _chains(loop)
        assert len(loop.used) == 8

    def test_broken_chain(self):
        a, b, c, d = new_points([[0, 0, 0], [1, 0, 0], [2, 0, 0], [3, 0, 0]])
        loop = new_loop()
        add_use(loop, FORWARD, new_line(a, b))
        add_use(loop, FORWARD, new_line(c, d))
        with pytest.raises(TopologyError):
            unscramble_loop(loop)

    def test_open_chain(self):
        a, b, c = new_points([[0, 0, 0], [1, 0, 0], [2, 0, 0]])
        loop = new_loop()
        add_use(loop, FORWARD, new_line(a, b))
        add_use(loop, FORWARD, new_line(b, c))
        with pytest.raises(TopologyError):
            unscramble_loop(loop)

    def test_rejects_shell(self):
        with pytest.raises(TopologyError):
            unscramble_loop(new_shell())
