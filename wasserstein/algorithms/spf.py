"""Shortest-path-first search over reduced costs.

Dijkstra on a `ResidualGraph` using the reduced cost
``cost(u, v) + potential[u] - potential[v]`` of every arc that still has
residual capacity. With valid potentials all reduced costs are non-negative,
so Dijkstra stays correct even though reverse arcs carry negative costs.

Notes:
    When ``dst_node`` is given the search stops as soon as it is popped. Only
    settled vertices are reported in the returned distances; callers updating
    potentials should give every unsettled vertex the destination's distance,
    which keeps all residual reduced costs non-negative.
"""

from __future__ import annotations

from heapq import heappop, heappush
from typing import Dict, List, Optional, Sequence, Tuple

from wasserstein.algorithms.residual import ResidualGraph


def spf(
    residual: ResidualGraph,
    src_node: int,
    potential: Sequence[int],
    dst_node: Optional[int] = None,
) -> Tuple[Dict[int, int], Dict[int, int]]:
    """Compute reduced-cost shortest paths from ``src_node``.

    Ties are broken by vertex index through the heap ordering, and arcs are
    relaxed in insertion order, so the result is deterministic.

    Args:
        residual: Residual graph to search.
        src_node: Start vertex.
        potential: Vertex potentials keeping reduced costs non-negative.
        dst_node: Optional destination; the search stops once it is settled.

    Returns:
        A tuple ``(dist, pred)``:
          - dist: Reduced-cost distance of every settled vertex.
          - pred: For every settled vertex except ``src_node``, the arc id used
            to reach it.

    Raises:
        KeyError: If ``src_node`` is not a vertex of the residual graph.
    """
    if not 0 <= src_node < residual.num_nodes:
        raise KeyError(f"Source node '{src_node}' is not in the graph.")

    head = residual.head
    cap = residual.cap
    cost = residual.cost
    adj = residual.adj

    tentative: Dict[int, int] = {src_node: 0}
    tentative_pred: Dict[int, int] = {}
    dist: Dict[int, int] = {}
    pred: Dict[int, int] = {}
    min_pq: List[Tuple[int, int]] = [(0, src_node)]

    while min_pq:
        current_cost, node_id = heappop(min_pq)
        if node_id in dist or current_cost > tentative[node_id]:
            continue

        dist[node_id] = current_cost
        if node_id in tentative_pred:
            pred[node_id] = tentative_pred[node_id]
        if node_id == dst_node:
            break

        node_potential = potential[node_id]
        for arc in adj[node_id]:
            if cap[arc] <= 0:
                continue
            neighbor_id = head[arc]
            if neighbor_id in dist:
                continue
            new_cost = current_cost + cost[arc] + node_potential - potential[neighbor_id]
            if neighbor_id not in tentative or new_cost < tentative[neighbor_id]:
                tentative[neighbor_id] = new_cost
                tentative_pred[neighbor_id] = arc
                heappush(min_pq, (new_cost, neighbor_id))

    return dist, pred


def resolve_path(residual: ResidualGraph, pred: Dict[int, int], dst_node: int) -> List[int]:
    """Return the arc ids from the search source to ``dst_node``, in order."""
    path: List[int] = []
    node_id = dst_node
    while node_id in pred:
        arc = pred[node_id]
        path.append(arc)
        node_id = residual.tail(arc)
    path.reverse()
    return path
