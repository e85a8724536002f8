"""Conversion between `FlowNetwork` and NetworkX graphs.

Besides export for inspection, the NetworkX graph is used as a reference
solver: ``networkx.network_simplex`` accepts node ``demand`` and edge
``weight``/``capacity`` attributes and handles parallel edges on a
``MultiDiGraph``, so flows map back onto our edges by key.
"""

from __future__ import annotations

from typing import Callable, Optional

import networkx as nx

from wasserstein.graph.network import FlowNetwork


def to_networkx(
    network: FlowNetwork,
    clamp: Optional[Callable[[int], int]] = None,
) -> nx.MultiDiGraph:
    """Convert a FlowNetwork to a NetworkX MultiDiGraph.

    Nodes are vertex indices with ``coordinates``, ``supply`` and ``demand``
    attributes (``demand`` follows the NetworkX sign convention, i.e. it is the
    negated supply). Edge keys are positions in ``network.edges``; each edge
    carries ``weight`` (cost), ``capacity`` and ``flow``.

    Args:
        network: Network to convert.
        clamp: Optional function applied to supplies and costs.

    Returns:
        A new MultiDiGraph.
    """
    clamp = clamp or (lambda value: value)
    nx_graph = nx.MultiDiGraph()
    for vertex in network.vertices:
        supply = clamp(vertex.supply)
        nx_graph.add_node(
            vertex.index,
            coordinates=vertex.coordinates,
            supply=supply,
            demand=-supply,
        )
    for key, edge in enumerate(network.edges):
        nx_graph.add_edge(
            edge.left,
            edge.right,
            key=key,
            weight=clamp(edge.cost),
            capacity=network.max_capacity,
            flow=edge.flow,
        )
    return nx_graph


def from_networkx(nx_graph: nx.MultiDiGraph, max_capacity: int) -> FlowNetwork:
    """Rebuild a FlowNetwork from a graph produced by `to_networkx`.

    Nodes must be the integers ``0..n-1``. Edges are appended in key order.
    """
    network = FlowNetwork(max_capacity)
    for index in sorted(nx_graph.nodes):
        data = nx_graph.nodes[index]
        if index != len(network.vertices):
            raise ValueError(f"Node ids must be contiguous from 0, found {index}")
        network.add_vertex(data.get("coordinates", (0, 0)), data.get("supply", 0))
    for u, v, _key, data in sorted(nx_graph.edges(keys=True, data=True), key=lambda e: e[2]):
        network.add_edge(u, v, data["weight"], data.get("flow", 0))
    return network


def network_simplex_flows(
    network: FlowNetwork,
    clamp: Optional[Callable[[int], int]] = None,
) -> tuple[int, list[int]]:
    """Solve ``network`` with NetworkX's network simplex.

    Returns:
        ``(total_cost, flows)`` where ``flows[i]`` is the flow on ``network.edges[i]``.

    Raises:
        networkx.NetworkXUnfeasible: If the demands cannot be met.
    """
    nx_graph = to_networkx(network, clamp)
    total_cost, flow_dict = nx.network_simplex(nx_graph)
    flows = [0] * len(network.edges)
    for u, targets in flow_dict.items():
        for v, keyed in targets.items():
            for key, value in keyed.items():
                flows[key] = int(value)
    return int(total_cost), flows
