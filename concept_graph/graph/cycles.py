"""
Cycle detection over directed dependency graphs.

The detector is edge-type agnostic: callers pass the (from, to) pairs that
define "depends on", usually the prerequisite edges of a project.
"""

from typing import Dict, Hashable, Iterable, List, Optional, Tuple

import networkx as nx

Edge = Tuple[Hashable, Hashable]

_UNVISITED = 0
_IN_PROGRESS = 1
_DONE = 2


def build_adjacency(
    node_ids: Iterable[Hashable],
    edges: Iterable[Edge],
) -> Dict[Hashable, List[Hashable]]:
    """
    Build an id-keyed adjacency map.

    Every supplied node gets an entry, and so does every edge endpoint, so
    nodes that only appear as targets are still visited.
    """
    adjacency: Dict[Hashable, List[Hashable]] = {}
    for node in node_ids:
        adjacency.setdefault(node, [])
    for source, target in edges:
        adjacency.setdefault(source, []).append(target)
        adjacency.setdefault(target, [])
    return adjacency


def has_cycle(node_ids: Iterable[Hashable], edges: Iterable[Edge]) -> bool:
    """
    Return True if the directed graph contains a cycle.

    Depth-first search with three-state colouring. A back edge to a node that
    is still on the current path is a cycle, self-loops included. Every node
    is used as a start so disconnected components are covered. Runs with an
    explicit stack, so long prerequisite chains do not hit the recursion
    limit.

    Args:
        node_ids: All nodes of the graph.
        edges: Directed (from, to) pairs.

    Returns:
        True as soon as a cycle is found, False once every node is done.
    """
    adjacency = build_adjacency(node_ids, edges)
    state = {node: _UNVISITED for node in adjacency}

    for root in adjacency:
        if state[root] != _UNVISITED:
            continue

        state[root] = _IN_PROGRESS
        stack = [(root, iter(adjacency[root]))]

        while stack:
            node, successors = stack[-1]
            advanced = False

            for successor in successors:
                successor_state = state[successor]
                if successor_state == _IN_PROGRESS:
                    return True
                if successor_state == _UNVISITED:
                    state[successor] = _IN_PROGRESS
                    stack.append((successor, iter(adjacency[successor])))
                    advanced = True
                    break

            if not advanced:
                state[node] = _DONE
                stack.pop()

    return False


def find_cycle(
    node_ids: Iterable[Hashable],
    edges: Iterable[Edge],
) -> Optional[List[Hashable]]:
    """
    Return the nodes of one cycle, in path order, or None if acyclic.

    Used for diagnostics only; has_cycle() is the authoritative check.
    """
    graph = nx.DiGraph()
    graph.add_nodes_from(node_ids)
    graph.add_edges_from(edges)

    try:
        cycle_edges = nx.find_cycle(graph)
    except nx.NetworkXNoCycle:
        return None

    return [source for source, _target in cycle_edges]
