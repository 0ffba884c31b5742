#!/usr/bin/env python3
"""
Build one of the gmodel demo models and write it out.

Usage:
    python -m gmodel SHAPE [--output STEM] [--format geo|dmg|both]
                           [--config FILE] [--mesh] [--verbose]

Examples:
    # Unit cube to cube.geo
    python -m gmodel cube

    # Two disks swept together, both formats, debug logging
    python -m gmodel target --format both --output build/target --verbose

    # Sizes and numbering from a YAML file
    python -m gmodel line-in-cube --config model.yaml

    # Also mesh the result with Gmsh (needs the gmsh package)
    python -m gmodel cylinder --mesh
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from gmodel import setup_logging
from gmodel.assembly import insert_into, weld_half_shell_onto
from gmodel.construct import (
    new_point, new_points, new_line, new_spline, new_loop, new_plane,
    new_circle, new_group, add_to_group, new_shell,
)
from gmodel.context import ModelContext, current_context, load_config, use_context
from gmodel.entity import FORWARD, REVERSE, add_use, embed
from gmodel.errors import GModelError
from gmodel.extrude import extrude_face, extrude_face_group
from gmodel.io import write_dmg, write_geo
from gmodel.shapes import (
    CubeFace, new_cube, new_disk, new_ball, get_cube_face, make_hemisphere,
)

logger = logging.getLogger(__name__)


def build_cube():
    return new_cube([0, 0, 0], [1, 0, 0], [0, 1, 0], [0, 0, 1])


def build_cube_in_cube():
    third = 1.0 / 3.0
    outer = build_cube()
    inner = new_cube([third, third, third], [third, 0, 0], [0, third, 0], [0, 0, third])
    insert_into(outer, inner)
    return outer


def build_cylinder():
    disk = new_disk([0, 0, 0], [0, 0, 1], [1, 0, 0])
    return extrude_face(disk, [0, 0, 1]).middle


def build_spline_shape():
    a, b, c, d, e = new_points([[0, 0, 0], [1, 0, 0], [1, 1, 0],
                                [0.5, 1.5, 0], [0, 1, 0]])
    loop = new_loop()
    add_use(loop, FORWARD, new_line(a, b))
    add_use(loop, FORWARD, new_line(b, c))
    add_use(loop, FORWARD, new_spline([c, d, e]))
    add_use(loop, FORWARD, new_line(e, a))
    return extrude_face(new_plane(loop), [0, 0, 1]).middle


def build_dimple():
    cube = build_cube()
    bottom = get_cube_face(cube, CubeFace.BOTTOM)
    circle = new_circle([0.5, 0.5, 0], [0, 0, 1], [0.25, 0, 0])
    half_shell = new_shell()
    make_hemisphere(circle, new_point([0.5, 0.5, 0]), half_shell, FORWARD)
    weld_half_shell_onto(cube, bottom, half_shell, REVERSE)
    return cube


def build_target():
    outer_face = new_disk([0, 0, 0], [0, 0, 1], [2, 0, 0])
    inner_face = new_disk([0, 0, 0], [0, 0, 1], [1, 0, 0])
    insert_into(outer_face, inner_face)
    faces = new_group()
    add_to_group(faces, inner_face)
    add_to_group(faces, outer_face)
    return extrude_face_group(faces, lambda p: [p[0], p[1], p[2] + 0.2, 1.0]).middle


def build_line_in_cube():
    cube = build_cube()
    size = current_context().default_size / 10.0
    line = new_line(new_point([0.25, 0.5, 0.5], size), new_point([0.75, 0.5, 0.5], size))
    embed(cube, line)
    return cube


def build_ball():
    return new_ball([0, 0, 0], [0, 0, 1], [1, 0, 0])


SHAPES = {
    'cube': build_cube,
    'cube-in-cube': build_cube_in_cube,
    'cylinder': build_cylinder,
    'spline-shape': build_spline_shape,
    'dimple': build_dimple,
    'target': build_target,
    'line-in-cube': build_line_in_cube,
    'ball': build_ball,
}


def write_model(root, stem, fmt):
    """Write ``root`` as ``STEM.geo`` and/or ``STEM.dmg``.  Returns the
    paths written."""
    stem = Path(stem)
    written = []
    if fmt in ('geo', 'both'):
        path = stem.parent / (stem.name + '.geo')
        write_geo(root, path)
        written.append(path)
    if fmt in ('dmg', 'both'):
        path = stem.parent / (stem.name + '.dmg')
        write_dmg(root, path)
        written.append(path)
    return written


def mesh_model_file(geo_path):
    from gmodel.mesher import gmsh_available, mesh_geo

    if not gmsh_available():
        print("Error: --mesh needs the gmsh package (pip install gmodel[mesh])",
              file=sys.stderr)
        return None
    msh_path = geo_path.with_suffix('.msh')
    stats = mesh_geo(geo_path, output=msh_path)
    print(f"{msh_path}: {stats.nodes} nodes, {stats.element_count} elements")
    return msh_path


def build_parser():
    parser = argparse.ArgumentParser(
        prog='python -m gmodel',
        description='Build a gmodel demo model and write it as .geo/.dmg text',
    )
    parser.add_argument('shape', choices=sorted(SHAPES), help='Model to build')
    parser.add_argument('-o', '--output', metavar='STEM',
                        help='Output path without extension (default: shape name)')
    parser.add_argument('-f', '--format', choices=('geo', 'dmg', 'both'), default='geo',
                        help='Output format (default: geo)')
    parser.add_argument('-c', '--config', metavar='FILE',
                        help='YAML file with default_size, tolerance and first_id')
    parser.add_argument('--mesh', action='store_true',
                        help='Mesh the written .geo file with Gmsh')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log construction steps')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        if args.config:
            ctx = load_config(args.config)
        else:
            ctx = ModelContext()
        if args.mesh and ctx.first_id < 1:
            # gmsh does not accept entity tag 0
            logger.info("numbering from 1 for meshing")
            ctx = replace(ctx, first_id=1)
        with use_context(ctx):
            root = SHAPES[args.shape]()
        stem = args.output or args.shape.replace('-', '_')
        if args.mesh and args.format == 'dmg':
            args.format = 'both'
        written = write_model(root, stem, args.format)
    except GModelError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    for path in written:
        print(path)
    logger.debug("%s: %d objects created", args.shape, ctx.created)

    if args.mesh:
        geo_path = next(p for p in written if p.suffix == '.geo')
        if mesh_model_file(geo_path) is None:
            return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
