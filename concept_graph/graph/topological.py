"""
Deterministic topological ordering (learning order).

Kahn's algorithm with a FIFO queue seeded in input order: when several nodes
become available at the same time, the one supplied earlier comes out first.
"""

import logging
from collections import deque
from typing import Dict, Hashable, Iterable, List, Optional, Sequence

from concept_graph.core.exceptions import CircularDependencyError
from concept_graph.graph.cycles import Edge, find_cycle

logger = logging.getLogger(__name__)


def topological_order(
    nodes: Sequence[Hashable],
    edges: Iterable[Edge],
    project_id: Optional[str] = None,
) -> List[Hashable]:
    """
    Order nodes so that every edge (u, v) places u before v.

    Args:
        nodes: All nodes, in tie-break order. Duplicates keep their first
            position.
        edges: Directed (prerequisite, dependent) pairs. Edges touching a node
            that is not in ``nodes`` are ignored.
        project_id: Only used to enrich the error on failure.

    Returns:
        Every node exactly once, dependencies first. Isolated nodes are
        included.

    Raises:
        CircularDependencyError: If the edges contain a cycle. A partial
            order is never returned.
    """
    ordered_nodes = list(dict.fromkeys(nodes))
    in_degree: Dict[Hashable, int] = {node: 0 for node in ordered_nodes}
    successors: Dict[Hashable, List[Hashable]] = {node: [] for node in ordered_nodes}

    kept_edges = []
    for source, target in edges:
        if source not in in_degree or target not in in_degree:
            logger.debug(f"Ignoring edge outside the node set: {source} -> {target}")
            continue
        successors[source].append(target)
        in_degree[target] += 1
        kept_edges.append((source, target))

    queue = deque(node for node in ordered_nodes if in_degree[node] == 0)
    result: List[Hashable] = []

    while queue:
        node = queue.popleft()
        result.append(node)

        for successor in successors[node]:
            in_degree[successor] -= 1
            if in_degree[successor] == 0:
                queue.append(successor)

    if len(result) < len(ordered_nodes):
        placed = set(result)
        unresolved = [node for node in ordered_nodes if node not in placed]
        cycle = find_cycle(unresolved, [
            (s, t) for s, t in kept_edges if s not in placed and t not in placed
        ])
        raise CircularDependencyError(
            project_id=project_id,
            cycle=cycle,
            unresolved=unresolved,
        )

    return result
