"""Immutable result containers returned by the solver and distance API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Tuple

if TYPE_CHECKING:
    from wasserstein.graph.network import FlowNetwork

#: Grid position of a vertex, ``(row, col)``.
Coordinates = Tuple[int, int]

#: One unit-bundle of moved mass: ``(from, to, amount)``.
Move = Tuple[Coordinates, Coordinates, int]


@dataclass(frozen=True)
class FlowSolution:
    """Summary of a min-cost flow solve.

    Attributes:
        total_cost: Sum of ``flow * cost`` over all edges, as computed by the solver.
        total_flow: Units of mass routed from sources to sinks.
        augmentations: Number of augmenting paths (0 for network simplex).
        clamped: True if any supply or cost was clamped before solving.
    """

    total_cost: int
    total_flow: int
    augmentations: int
    clamped: bool = False


@dataclass(frozen=True)
class TransportResult:
    """Distance together with the solved network it was read from.

    Attributes:
        distance: Earth Mover's Distance between the two histograms.
        network: The network with per-edge flows assigned.
        solution: Solver summary.
    """

    distance: int
    network: FlowNetwork
    solution: FlowSolution
