"""Cycle detection over the requirement graph.

The requirement relation is a directed graph ``skill -> required skill``.
A cycle means no selection order can ever satisfy the skills on it, so a
cyclic model must be rejected before it reaches the query engine.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Mapping


def _canonical(cycle: list[str]) -> tuple[str, ...]:
    """Rotate a cycle (without its closing node) to start at its smallest id."""
    pivot = cycle.index(min(cycle))
    return tuple(cycle[pivot:] + cycle[:pivot])


def find_cycles(graph: Mapping[str, Iterable[str]]) -> list[list[str]]:
    """Detect cycles using depth-first search with a recursion-stack set.

    A back edge to a node still on the DFS path closes a cycle; the path
    from that node onward is the cycle. Each distinct cycle is reported
    once, regardless of which node the search entered it from. The search
    keeps an explicit stack of successor iterators, so chain length is not
    bounded by the interpreter's recursion limit.

    Args:
        graph: Adjacency mapping, node -> successors. Successors absent from
            the mapping are treated as sinks.

    Returns:
        A list of cycle paths, each closed by repeating its first node
        (e.g. ``["a", "b", "a"]``). Empty if the graph is acyclic.
    """
    visited: set[str] = set()
    on_stack: set[str] = set()
    path: list[str] = []
    seen: set[tuple[str, ...]] = set()
    cycles: list[list[str]] = []

    for root in graph:
        if root in visited:
            continue
        visited.add(root)
        on_stack.add(root)
        path.append(root)
        stack: list[Iterator[str]] = [iter(graph.get(root, ()))]

        while stack:
            succ = next(stack[-1], None)
            if succ is None:
                stack.pop()
                on_stack.discard(path.pop())
            elif succ in on_stack:
                cycle = path[path.index(succ):]
                key = _canonical(cycle)
                if key not in seen:
                    seen.add(key)
                    cycles.append(cycle + [succ])
            elif succ not in visited:
                visited.add(succ)
                on_stack.add(succ)
                path.append(succ)
                stack.append(iter(graph.get(succ, ())))

    return cycles
