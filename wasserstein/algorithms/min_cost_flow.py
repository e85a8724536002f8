"""Min-cost max-flow on balanced transportation networks.

Implements successive shortest augmenting paths with vertex potentials:

  1. Build the residual graph with a super-source feeding every source and a
     super-sink draining every sink (via ``ResidualGraph.from_network``).
  2. Repeatedly find the reduced-cost shortest path from super-source to
     super-sink with ``spf`` and push its bottleneck capacity.
  3. Update potentials from the settled distances so reduced costs stay
     non-negative for the next search.

All edge costs are non-negative, so the initial potentials are zero and no
Bellman-Ford pass is required. Because the problem is balanced, the flow is
maximal exactly when all supply has been routed, and the successive shortest
path invariant makes it minimal in cost at every step.

NetworkX's network simplex is available as an alternative method; both
methods go through the same post-solve integrity checks.
"""

from __future__ import annotations

from typing import Callable, List, Optional

import networkx as nx

from wasserstein.algorithms.residual import ResidualGraph
from wasserstein.algorithms.spf import resolve_path, spf
from wasserstein.config import SOLVER_CONFIG, SolverConfig
from wasserstein.errors import InfeasibleNetworkError, SolverIntegrityError
from wasserstein.graph.convert import network_simplex_flows
from wasserstein.graph.network import FlowNetwork
from wasserstein.logging import get_logger
from wasserstein.types import FlowSolution

logger = get_logger(__name__)


def solve_min_cost_flow(
    network: FlowNetwork,
    *,
    config: Optional[SolverConfig] = None,
) -> FlowSolution:
    """Assign a minimum-cost integral flow to ``network`` in place.

    Existing edge flows are discarded. On success every source ships exactly
    its supply, every sink receives exactly its demand and the total of
    ``flow * cost`` is minimal.

    Args:
        network: Balanced network to solve. Its edge ``flow`` fields are
            overwritten.
        config: Solver options. Defaults to the global ``SOLVER_CONFIG``.

    Returns:
        FlowSolution with the total cost and routing statistics.

    Raises:
        UnbalancedMassError: If supply and demand totals differ.
        InfeasibleNetworkError: If some supply cannot reach any sink.
        SolverIntegrityError: If the solved flows break an invariant.

    Examples:
        >>> net = FlowNetwork(max_capacity=2)
        >>> a = net.add_vertex((0, 0), supply=2)
        >>> b = net.add_vertex((3, 0), supply=-2)
        >>> net.add_edge(a, b)
        0
        >>> solve_min_cost_flow(net).total_cost
        6
    """
    config = config or SOLVER_CONFIG
    config.validate()
    network.check_balanced()
    network.reset_flows()

    clamp = config.clamp if config.clamp_values else None
    residual = ResidualGraph.from_network(network, clamp)
    if residual.clamped:
        logger.warning(
            "Clamped supplies or costs to +/-%d before solving; "
            "the reported cost may be lower than the exact value.",
            config.clamp_limit,
        )

    total_supply = sum(s for s in residual.supplies if s > 0)
    if total_supply == 0:
        logger.debug("Network carries no mass; nothing to solve.")
        return FlowSolution(0, 0, 0, residual.clamped)

    if config.method == "network_simplex":
        total_cost, flows, augmentations = _solve_network_simplex(network, clamp)
    else:
        total_cost, flows, augmentations = _solve_ssp(residual, total_supply, config)

    for edge, flow in zip(network.edges, flows):
        edge.flow = flow

    if config.check_integrity:
        _check_integrity(network, residual, flows, total_cost)
    else:
        _check_non_negative(network, flows)

    logger.debug(
        "Solved min-cost flow (%s): vertices=%d edges=%d flow=%d cost=%d augmentations=%d",
        config.method,
        len(network.vertices),
        len(network.edges),
        total_supply,
        total_cost,
        augmentations,
    )
    return FlowSolution(
        total_cost=total_cost,
        total_flow=total_supply,
        augmentations=augmentations,
        clamped=residual.clamped,
    )


def _solve_ssp(
    residual: ResidualGraph,
    total_supply: int,
    config: SolverConfig,
) -> tuple[int, List[int], int]:
    src, dst = residual.source, residual.sink
    potential = [0] * residual.num_nodes
    placed = 0
    total_cost = 0
    augmentations = 0

    while placed < total_supply:
        if config.max_augmentations is not None and augmentations >= config.max_augmentations:
            raise SolverIntegrityError(
                f"Exceeded {config.max_augmentations} augmentations with "
                f"{total_supply - placed} units left to route."
            )

        dist, pred = spf(residual, src, potential, dst_node=dst)
        if dst not in dist:
            raise InfeasibleNetworkError(
                f"Only {placed} of {total_supply} units could be routed; "
                "remaining supply has no path to any demand."
            )

        # Unsettled vertices take the destination distance
        dst_dist = dist[dst]
        for node_id in range(residual.num_nodes):
            potential[node_id] += dist.get(node_id, dst_dist)

        path = resolve_path(residual, pred, dst)
        amount = min(residual.cap[arc] for arc in path)
        for arc in path:
            residual.push(arc, amount)
        total_cost += amount * sum(residual.cost[arc] for arc in path)
        placed += amount
        augmentations += 1

    return total_cost, residual.edge_flows(), augmentations


def _solve_network_simplex(
    network: FlowNetwork, clamp: Optional[Callable[[int], int]]
) -> tuple[int, List[int], int]:
    try:
        total_cost, flows = network_simplex_flows(network, clamp)
    except nx.NetworkXUnfeasible as exc:
        raise InfeasibleNetworkError(str(exc)) from exc
    return total_cost, flows, 0


def _check_non_negative(network: FlowNetwork, flows: List[int]) -> None:
    for edge, flow in zip(network.edges, flows):
        if flow < 0:
            logger.error(
                "Negative flow %d on edge %d -> %d", flow, edge.left, edge.right
            )
            raise SolverIntegrityError(
                f"found negative flow {flow} on edge {edge.left} -> {edge.right}"
            )


def _check_integrity(
    network: FlowNetwork,
    residual: ResidualGraph,
    flows: List[int],
    total_cost: int,
) -> None:
    """Verify non-negativity, conservation and the reported cost."""
    _check_non_negative(network, flows)

    for index, net_out in enumerate(network.net_outflows()):
        expected = residual.supplies[index]
        if net_out != expected:
            logger.error(
                "Conservation broken at vertex %d: net outflow %d, supply %d",
                index,
                net_out,
                expected,
            )
            raise SolverIntegrityError(
                f"vertex {index} has net outflow {net_out} but supply {expected}"
            )

    derived = sum(f * c for f, c in zip(flows, residual.edge_costs()))
    if derived != total_cost:
        logger.error("Solver cost %d differs from edge sum %d", total_cost, derived)
        raise SolverIntegrityError(
            f"solver reported cost {total_cost} but edge flows sum to {derived}"
        )
