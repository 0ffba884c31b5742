"""Closure engine: dependency-ordered enumeration of sub-graphs.

The closure of an object is everything reachable from it through uses
(and, on request, helpers and embedded references).  It is found by a
breadth-first walk from the root and returned *dependency first*: the
reverse of visitation order, so that every object comes after the
objects it is built from.  Serializers, deep copy and transform all
rely on that ordering.

Marks live in a visited set owned by each call, so traversals are
reentrant and leave nothing behind on the nodes.

Copyright (c) 2025 Richard DeVaul
MIT License
"""

from collections import deque

from gmodel.entity import Kind, is_entity
from gmodel.errors import TopologyError, entity_details


def dependencies(obj, include_helpers=True, include_embedded=False):
    """Return the direct dependencies of ``obj``: its used objects, then
    optionally its helpers and embedded entities."""
    deps = [use.obj for use in obj.used]
    if include_helpers:
        deps.extend(obj.helpers)
    if include_embedded:
        deps.extend(obj.embedded)
    return deps


def visit_order(root, include_helpers=True, include_embedded=False):
    """Breadth-first visitation order from ``root``, root first.  Each
    object appears once, at its first discovery."""
    visited = {root}
    queue = deque([root])
    order = []
    while queue:
        current = queue.popleft()
        order.append(current)
        for child in dependencies(current, include_helpers, include_embedded):
            if child not in visited:
                visited.add(child)
                queue.append(child)
    return order


def closure(root, include_helpers=True, include_embedded=False):
    """Return the closure of ``root``, dependencies first.

    The order is the reverse of :func:`visit_order`.  When a graph is
    not layered by depth, reverse BFS order can put an object ahead of
    one of its own dependencies; such a dependency is pulled forward
    to just before its first user.

    Raises
    ------
    TopologyError
        If the graph below ``root`` contains a cycle.
    """
    order = visit_order(root, include_helpers, include_embedded)
    emitted = set()
    out = []
    for obj in reversed(order):
        if obj in emitted:
            continue
        on_path = {obj}
        stack = [(obj, iter(dependencies(obj, include_helpers, include_embedded)))]
        while stack:
            node, children = stack[-1]
            for child in children:
                if child in emitted:
                    continue
                if child in on_path:
                    raise TopologyError(
                        "cycle through {} {}".format(child.kind.name, child.id),
                        entity_details('closure', node, cycle_id=child.id))
                on_path.add(child)
                stack.append((child, iter(dependencies(
                    child, include_helpers, include_embedded))))
                break
            else:
                stack.pop()
                on_path.discard(node)
                emitted.add(node)
                out.append(node)
    return out


def filter_by_dim(objs, dim):
    """Entities (not aggregates or groups) of topological dimension ``dim``."""
    return [o for o in objs if is_entity(o.kind) and o.dim == dim]


def filter_points(objs):
    return [o for o in objs if o.kind == Kind.POINT]


def count_of_kind(objs, kind):
    return sum(1 for o in objs if o.kind == kind)


def count_of_dim(objs, dim):
    return len(filter_by_dim(objs, dim))
