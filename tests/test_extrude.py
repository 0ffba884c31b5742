"""Tests for the extrusion engine."""

import pytest

from gmodel import geom
from gmodel.closure import closure, count_of_dim, count_of_kind
from gmodel.construct import (
    new_point, new_points, new_line, new_arc, new_spline_through, new_loop,
    new_polyline_from, new_group, add_to_group, add_hole_to_face,
    edge_point, arc_center, spline_points, exit_point, entry_point,
    volume_shell, face_loop,
)
from gmodel.entity import Kind, FORWARD, REVERSE, add_use, used_direction
from gmodel.errors import TopologyError
from gmodel.extrude import (
    Extruded, as_transform, extrude_point, extrude_points, extrude_edge,
    extrude_edges, extrude_loop, extrude_face, extrude_face_group,
)
from gmodel.io import format_dmg, format_geo
from gmodel.shapes import new_cube, new_disk, new_square, CubeFace, get_cube_face


def _chains(loop):
    uses = loop.used
    return all(exit_point(uses[i]) is entry_point(uses[(i + 1) % len(uses)])
               for i in range(len(uses)))


def _kind_counts(root):
    objs = closure(root)
    return sorted((k, count_of_kind(objs, k)) for k in Kind)


class TestMotion:
    """Test translation and callable motions."""

    def test_vector_becomes_transform(self):
        move = as_transform([0, 0, 2])
        assert move([1, 1, 1, 1]) == [1.0, 1.0, 3.0, 1.0]

    def test_callable_passes_through(self):
        def f(p):
            return p
        assert as_transform(f) is f

    def test_callable_cannot_move_start(self):
        """A motion that edits its argument in place leaves the start point alone."""
        def lift(pos):
            pos[2] += 1.0
            return pos
        p = new_point([1, 0, 0])
        ext = extrude_point(p, lift)
        assert p.pos == [1.0, 0.0, 0.0, 1.0]
        assert ext.end.pos == [1.0, 0.0, 1.0, 1.0]


class TestExtrudePoint:
    """Test point extrusion."""

    def test_point(self):
        p = new_point([1, 0, 0], 0.3)
        ext = extrude_point(p, [0, 0, 1])
        assert isinstance(ext, Extruded)
        assert ext.middle.kind == Kind.LINE
        assert edge_point(ext.middle, 0) is p
        assert edge_point(ext.middle, 1) is ext.end
        assert ext.end.pos == [1.0, 0.0, 1.0, 1.0]
        assert ext.end.size == 0.3

    def test_points_once_each(self):
        a, b = new_points([[0, 0, 0], [1, 0, 0]])
        exts = extrude_points([a, b, a], [0, 0, 1])
        assert list(exts) == [a, b]


class TestExtrudeEdge:
    """Test edge extrusion."""

    def test_line_gives_plane(self):
        line = new_line(*new_points([[0, 0, 0], [1, 0, 0]]))
        ext = extrude_edge(line, [0, 1, 0])
        face = ext.middle
        assert face.kind == Kind.PLANE
        loop = face_loop(face)
        assert [u.direction for u in loop.used] == [FORWARD, FORWARD, REVERSE, REVERSE]
        assert loop.used[0].obj is line
        assert loop.used[2].obj is ext.end
        assert _chains(loop)

    def test_arc_gives_ruled_with_moved_center(self):
        a, c, b = new_points([[1, 0, 0], [0, 0, 0], [0, 1, 0]])
        arc = new_arc(a, c, b)
        ext = extrude_edge(arc, [0, 0, 1])
        assert ext.middle.kind == Kind.RULED
        assert ext.end.kind == Kind.ARC
        moved = arc_center(ext.end)
        assert moved is not c
        assert moved.pos == [0.0, 0.0, 1.0, 1.0]

    def test_spline_helpers_moved(self):
        spline = new_spline_through([[0, 0, 0], [1, 1, 0], [2, 0, 0]])
        ext = extrude_edge(spline, [0, 0, 1])
        moved = spline_points(ext.end)
        assert [p.pos[2] for p in moved] == [1.0, 1.0, 1.0]
        assert moved[1] is not spline.helpers[0]

    def test_shared_point_extrusions(self):
        a, b, c = new_points([[0, 0, 0], [1, 0, 0], [2, 0, 0]])
        ab = new_line(a, b)
        bc = new_line(b, c)
        point_exts = extrude_points([a, b, c], [0, 1, 0])
        exts = extrude_edges([ab, bc], [0, 1, 0], point_exts)
        assert edge_point(exts[ab].end, 1) is edge_point(exts[bc].end, 0)

    def test_non_edge_rejected(self):
        with pytest.raises(TopologyError):
            extrude_edge(new_point(), [0, 0, 1])


class TestExtrudeLoop:
    """Test loop extrusion."""

    def test_triangle(self):
        loop = new_polyline_from([[0, 0, 0], [1, 0, 0], [0, 1, 0]])
        ext = extrude_loop(loop, [0, 0, 1])
        shell = ext.middle
        assert shell.kind == Kind.SHELL
        assert len(shell.used) == 3
        assert ext.end.kind == Kind.LOOP
        assert len(ext.end.used) == 3
        assert _chains(ext.end)

    def test_shell_direction_composes(self):
        loop = new_loop()
        a, b, c = new_points([[0, 0, 0], [1, 0, 0], [0, 1, 0]])
        add_use(loop, FORWARD, new_line(a, b))
        add_use(loop, REVERSE, new_line(c, b))
        add_use(loop, FORWARD, new_line(c, a))
        ext = extrude_loop(loop, [0, 0, 1], shell_dir=REVERSE)
        assert [u.direction for u in ext.middle.used] == [REVERSE, FORWARD, REVERSE]
        assert [u.direction for u in ext.end.used] == [FORWARD, REVERSE, FORWARD]


class TestExtrudeFace:
    """Test face extrusion."""

    def test_unit_cube(self):
        cube = new_cube([0, 0, 0], [1, 0, 0], [0, 1, 0], [0, 0, 1])
        objs = closure(cube)
        assert count_of_dim(objs, 0) == 8
        assert count_of_dim(objs, 1) == 12
        assert count_of_dim(objs, 2) == 6
        assert count_of_dim(objs, 3) == 1
        assert format_dmg(cube).splitlines()[0] == "1 6 12 8"

    def test_cube_shell_layout(self):
        cube = new_cube([0, 0, 0], [1, 0, 0], [0, 1, 0], [0, 0, 1])
        shell = volume_shell(cube)
        assert [u.direction for u in shell.used[:2]] == [REVERSE, FORWARD]
        bottom = get_cube_face(cube, CubeFace.BOTTOM)
        top = get_cube_face(cube, CubeFace.TOP)
        assert all(p.pos[2] == 0.0 for p in closure(bottom) if p.kind == Kind.POINT)
        assert all(p.pos[2] == 1.0 for p in closure(top) if p.kind == Kind.POINT)

    def test_every_cube_edge_shared_by_two_faces(self):
        """The swept boundary is conformal."""
        cube = new_cube([0, 0, 0], [1, 0, 0], [0, 1, 0], [0, 0, 1])
        counts = {}
        for face_use in volume_shell(cube).used:
            for loop_use in face_use.obj.used:
                for edge_use in loop_use.obj.used:
                    counts[edge_use.obj] = counts.get(edge_use.obj, 0) + 1
        assert len(counts) == 12
        assert set(counts.values()) == {2}

    def test_translation_and_callable_agree(self):
        a = new_square([0, 0, 0], [1, 0, 0], [0, 1, 0])
        b = new_square([0, 0, 0], [1, 0, 0], [0, 1, 0])
        by_vector = extrude_face(a, [0, 0, 1])
        by_callable = extrude_face(b, lambda p: geom.add(p, [0, 0, 1]))
        assert _kind_counts(by_vector.middle) == _kind_counts(by_callable.middle)
        assert [p.pos for p in closure(by_vector.end) if p.kind == Kind.POINT] == \
            [p.pos for p in closure(by_callable.end) if p.kind == Kind.POINT]

    def test_cylinder(self):
        disk = new_disk([0, 0, 0], [0, 0, 1], [1, 0, 0])
        ext = extrude_face(disk, [0, 0, 1])
        objs = closure(ext.middle, include_helpers=False)
        # 2 end faces and 4 ruled walls
        assert count_of_kind(objs, Kind.PLANE) == 2
        assert count_of_kind(objs, Kind.RULED) == 4
        assert count_of_kind(objs, Kind.ARC) == 8
        assert count_of_kind(objs, Kind.LINE) == 4
        # every end arc gets its own moved center
        centers = {arc_center(u.obj) for u in face_loop(ext.end).used}
        assert len(centers) == 4
        assert all(c.pos == [0.0, 0.0, 1.0, 1.0] for c in centers)

    def test_face_with_hole(self):
        square = new_square([0, 0, 0], [3, 0, 0], [0, 3, 0])
        hole = new_polyline_from([[1, 1, 0], [2, 1, 0], [2, 2, 0], [1, 2, 0]])
        add_hole_to_face(square, hole)
        ext = extrude_face(square, [0, 0, 1])
        shell = volume_shell(ext.middle)
        # bottom, top, 4 outer walls, 4 hole walls
        assert len(shell.used) == 10
        assert [u.direction for u in ext.end.used] == [FORWARD, REVERSE]
        hole_walls = shell.used[6:]
        assert all(u.direction == REVERSE for u in hole_walls)

    def test_non_face_rejected(self):
        with pytest.raises(TopologyError):
            extrude_face(new_loop(), [0, 0, 1])


class TestExtrudeFaceGroup:
    """Test sweeping sibling faces together."""

    def _target(self):
        outer = new_disk([0, 0, 0], [0, 0, 1], [2, 0, 0])
        inner = new_disk([0, 0, 0], [0, 0, 1], [1, 0, 0])
        add_hole_to_face(outer, face_loop(inner))
        group = new_group()
        add_to_group(group, inner)
        add_to_group(group, outer)
        return group, inner, outer

    def test_interface_walls_shared(self):
        group, inner, outer = self._target()
        ext = extrude_face_group(group, lambda p: geom.add(p, [0, 0, 0.2]))
        inner_volume, outer_volume = [u.obj for u in ext.middle.used]
        inner_shell = volume_shell(inner_volume)
        outer_shell = volume_shell(outer_volume)
        shared = set(u.obj for u in inner_shell.used) & set(u.obj for u in outer_shell.used)
        assert len(shared) == 4
        for wall in shared:
            assert used_direction(inner_shell, wall) == FORWARD
            assert used_direction(outer_shell, wall) == REVERSE

    def test_end_faces_share_end_loop(self):
        group, inner, outer = self._target()
        ext = extrude_face_group(group, [0, 0, 0.2])
        inner_end, outer_end = [u.obj for u in ext.end.used]
        assert face_loop(inner_end) is outer_end.used[1].obj
        assert outer_end.used[1].direction == REVERSE

    def test_each_edge_swept_once(self):
        group, inner, outer = self._target()
        ext = extrude_face_group(group, [0, 0, 0.2])
        objs = closure(ext.middle, include_helpers=False)
        # 8 ring points below, 8 above
        assert count_of_kind(objs, Kind.POINT) == 16
        # 8 start arcs, 8 end arcs
        assert count_of_kind(objs, Kind.ARC) == 16
        assert count_of_kind(objs, Kind.LINE) == 8
        assert count_of_kind(objs, Kind.RULED) == 8
        assert count_of_kind(objs, Kind.VOLUME) == 2

    def test_geo_output_declares_before_use(self):
        group, inner, outer = self._target()
        ext = extrude_face_group(group, [0, 0, 0.2])
        declared = set()
        for line in format_geo(ext.middle).splitlines():
            if line.startswith("Physical"):
                continue
            name, _, rest = line.partition("(")
            oid, _, body = rest.partition(")")
            refs = body.strip(" ={};").split(",")
            for ref in refs:
                if name != "Point":
                    assert abs(int(ref)) in declared
            declared.add(int(oid))

    def test_rejects_non_faces(self):
        group = new_group()
        add_to_group(group, new_cube([0, 0, 0], [1, 0, 0], [0, 1, 0], [0, 0, 1]))
        with pytest.raises(TopologyError):
            extrude_face_group(group, [0, 0, 1])
