"""Parametric evaluation of points and edges.

Copyright (c) 2025 Richard DeVaul
MIT License
"""

from math import acos, cos, sin, pi, pow

from gmodel import geom
from gmodel.context import current_context
from gmodel.construct import (
    edge_point, arc_center, arc_normal, ellipse_center, ellipse_major_pt,
    spline_points,
)
from gmodel.entity import Kind
from gmodel.errors import EllipseError, TopologyError, entity_details


def _cosine(a, b):
    c = geom.dot(geom.unit(a), geom.unit(b))
    return max(-1.0, min(1.0, c))


def are_parallel(a, b, tolerance):
    return 1.0 - abs(_cosine(a, b)) < tolerance


def are_perpendicular(a, b, tolerance):
    return abs(_cosine(a, b)) < tolerance


def evaluate(obj, u):
    """Position along ``obj`` at parameter ``u`` in ``[0, 1]``.

    Points ignore ``u``.  Ellipses must be quarter ellipses, with one
    endpoint on the major axis and the other on the minor axis;
    anything else raises :class:`~gmodel.errors.EllipseError`.
    """
    kind = obj.kind
    if kind == Kind.POINT:
        return list(obj.pos)
    if kind == Kind.LINE:
        a = edge_point(obj, 0).pos
        b = edge_point(obj, 1).pos
        return geom.add(geom.scale3(a, 1.0 - u), geom.scale3(b, u))
    if kind == Kind.ARC:
        return _evaluate_arc(obj, u)
    if kind == Kind.ELLIPSE:
        return _evaluate_ellipse(obj, u)
    if kind == Kind.SPLINE:
        return _evaluate_spline(obj, u)
    raise TopologyError("cannot evaluate {} {}".format(kind.name, obj.id),
                        entity_details('evaluate', obj))


def _evaluate_arc(arc, u):
    c = arc_center(arc).pos
    ca = geom.sub(edge_point(arc, 0).pos, c)
    cb = geom.sub(edge_point(arc, 1).pos, c)
    angle = acos(_cosine(ca, cb)) * u
    return geom.add(c, geom.rotate(arc_normal(arc), angle, ca))


def _evaluate_ellipse(ellipse, u):
    tol = current_context().tolerance
    c = ellipse_center(ellipse).pos
    cm = geom.sub(ellipse_major_pt(ellipse).pos, c)
    ca = geom.sub(edge_point(ellipse, 0).pos, c)
    cb = geom.sub(edge_point(ellipse, 1).pos, c)
    if not are_parallel(cb, cm, tol):
        ca, cb = cb, ca
        u = 1.0 - u
        if not are_parallel(cb, cm, tol):
            raise EllipseError(
                "ellipse {} is not a quarter ellipse: no endpoint on the major axis".format(
                    ellipse.id),
                entity_details('evaluate', ellipse))
    if not are_perpendicular(ca, cm, tol):
        raise EllipseError(
            "ellipse {} is not a quarter ellipse: no endpoint on the minor axis".format(
                ellipse.id),
            entity_details('evaluate', ellipse))
    angle = pi / 2.0 * u
    return geom.add(c, geom.add(geom.scale3(ca, cos(angle)),
                                geom.scale3(cb, sin(angle))))


## splines are interpolating centripetal Catmull-Rom curves, one span
## per pair of consecutive points, end spans clamped

def _evaluate_spline(spline, u):
    ctrl = [p.pos for p in spline_points(spline)]
    count = len(ctrl)
    segment_count = count - 1

    u_clamped = max(0.0, min(1.0, float(u)))
    span = u_clamped * segment_count
    idx = int(span)
    tau = span - idx
    if idx >= segment_count:
        idx = segment_count - 1
        tau = 1.0

    p0 = ctrl[max(idx - 1, 0)]
    p1 = ctrl[idx]
    p2 = ctrl[idx + 1]
    p3 = ctrl[min(idx + 2, count - 1)]
    return _catmullrom_point(p0, p1, p2, p3, 0.5, tau)


def _catmullrom_point(p0, p1, p2, p3, alpha, tau):
    def tj(ti, pa, pb):
        return ti + pow(geom.dist(pa, pb), alpha)

    t0 = 0.0
    t1 = tj(t0, p0, p1)
    t2 = tj(t1, p1, p2)
    t3 = tj(t2, p2, p3)

    if t2 - t1 < 1e-12:
        return list(p2)

    t = t1 + (t2 - t1) * tau

    A1 = _catmull_blend(p0, p1, t0, t1, t)
    A2 = _catmull_blend(p1, p2, t1, t2, t)
    A3 = _catmull_blend(p2, p3, t2, t3, t)

    B1 = _catmull_blend(A1, A2, t0, t2, t)
    B2 = _catmull_blend(A2, A3, t1, t3, t)

    return _catmull_blend(B1, B2, t1, t2, t)


def _catmull_blend(a, b, t0, t1, t):
    denom = t1 - t0
    if abs(denom) < 1e-12:
        return b
    w0 = (t1 - t) / denom
    w1 = (t - t0) / denom
    return geom.add(geom.scale3(a, w0), geom.scale3(b, w1))
