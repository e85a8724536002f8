"""Earth Mover's Distance between integer histograms.

The distance is the cost of the optimal flow on the transportation network
built from the two histograms. ``wasserstein_1d`` and ``wasserstein_2d`` return
the scalar; ``transport_1d`` and ``transport_2d`` also return the solved
network so callers can inspect how mass was moved.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Dict, List, Optional, Sequence, Tuple

from wasserstein.algorithms.min_cost_flow import solve_min_cost_flow
from wasserstein.config import SolverConfig
from wasserstein.errors import SolverIntegrityError
from wasserstein.graph.network import FlowNetwork
from wasserstein.histogram.builders import build_1d_network, build_2d_network
from wasserstein.logging import get_logger
from wasserstein.types import Coordinates, Move, TransportResult

logger = get_logger(__name__)


def extract_distance(network: FlowNetwork) -> int:
    """Return the transport cost ``sum(flow * cost)`` of a solved network."""
    return network.total_cost()


def transport_1d(
    left: Sequence[int],
    right: Sequence[int],
    *,
    config: Optional[SolverConfig] = None,
) -> TransportResult:
    """Solve the 1D transport problem and return distance and solved network.

    Raises:
        ShapeMismatchError: If the lengths differ.
        MassOverflowError: If the total mass exceeds the solver range.
        UnbalancedMassError: If the totals differ.
        InvalidHistogramError: On negative or non-integral entries.
    """
    network = build_1d_network(left, right)
    return _solve(network, config)


def transport_2d(
    left: Any,
    right: Any,
    *,
    config: Optional[SolverConfig] = None,
) -> TransportResult:
    """Solve the 2D transport problem on the three-layer network.

    Raises:
        ShapeMismatchError: If the shapes differ.
        MassOverflowError: If the total mass exceeds the solver range.
        UnbalancedMassError: If the totals differ.
        InvalidHistogramError: On ragged, negative or non-integral input.
    """
    network = build_2d_network(left, right)
    return _solve(network, config)


def wasserstein_1d(
    left: Sequence[int],
    right: Sequence[int],
    *,
    config: Optional[SolverConfig] = None,
) -> int:
    """Earth Mover's Distance between two 1D histograms of equal mass.

    Example:
        >>> wasserstein_1d([2, 1, 0, 0, 3, 0, 4], [0, 5, 3, 0, 2, 0, 0])
        22
    """
    return transport_1d(left, right, config=config).distance


def wasserstein_2d(
    left: Any,
    right: Any,
    *,
    config: Optional[SolverConfig] = None,
) -> int:
    """Earth Mover's Distance between two 2D histograms of equal shape and mass.

    Ground cost is the Manhattan distance between cells.

    Example:
        >>> wasserstein_2d([[3, 0, 0], [0, 0, 0], [0, 0, 0]],
        ...                [[0, 0, 0], [0, 0, 0], [0, 0, 3]])
        12
    """
    return transport_2d(left, right, config=config).distance


def _solve(network: FlowNetwork, config: Optional[SolverConfig]) -> TransportResult:
    solution = solve_min_cost_flow(network, config=config)
    distance = solution.total_cost
    if not solution.clamped:
        derived = extract_distance(network)
        if derived != distance:
            logger.error(
                "Distance mismatch: solver %d vs extracted %d", distance, derived
            )
            raise SolverIntegrityError(
                f"solver reported {distance} but edge flows cost {derived}"
            )
    return TransportResult(distance=distance, network=network, solution=solution)


def transport_plan(network: FlowNetwork) -> List[Move]:
    """Decompose the flow of a solved network into source-to-sink moves.

    Flow through relay vertices (such as the middle layer of a 2D network) is
    followed to its sink, so each move goes from a source cell to a sink cell.
    Moves between the same pair of coordinates are merged; moves where mass
    stays in place are kept with their zero cost.

    Returns:
        ``(from_coordinates, to_coordinates, amount)`` tuples sorted by
        coordinates.
    """
    remaining = [edge.flow for edge in network.edges]
    outgoing: List[List[int]] = [[] for _ in network.vertices]
    for position, edge in enumerate(network.edges):
        if edge.flow > 0:
            outgoing[edge.left].append(position)

    moves: Dict[Tuple[Coordinates, Coordinates], int] = defaultdict(int)
    for vertex in network.vertices:
        if vertex.supply <= 0:
            continue
        supply_left = vertex.supply
        while supply_left > 0:
            path = _walk(network, outgoing, remaining, vertex.index)
            if not path:
                break
            amount = min(supply_left, min(remaining[p] for p in path))
            for p in path:
                remaining[p] -= amount
            end = network.edges[path[-1]].right
            moves[(vertex.coordinates, network.vertices[end].coordinates)] += amount
            supply_left -= amount

    return sorted((src, dst, amount) for (src, dst), amount in moves.items())


def _walk(
    network: FlowNetwork,
    outgoing: List[List[int]],
    remaining: List[int],
    start: int,
) -> List[int]:
    """Follow edges with remaining flow from ``start`` until a sink is reached.

    Zero-cost cycles met on the way are cancelled out of ``remaining``.
    """
    path: List[int] = []
    seen: Dict[int, int] = {start: 0}
    node = start
    while True:
        if network.vertices[node].supply < 0 and path:
            return path
        position = next((p for p in outgoing[node] if remaining[p] > 0), None)
        if position is None:
            return path
        path.append(position)
        node = network.edges[position].right
        if node in seen:
            cycle = path[seen[node]:]
            amount = min(remaining[p] for p in cycle)
            for p in cycle:
                remaining[p] -= amount
            del path[seen[node]:]
            seen = {k: v for k, v in seen.items() if v <= seen[node]}
            continue
        seen[node] = len(path)
