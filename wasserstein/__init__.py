"""wasserstein: exact Earth Mover's Distance on integer histograms.

Computes the Wasserstein-1 distance with Manhattan ground cost between two
non-negative integer histograms of equal mass, in one or two dimensions, by
solving a min-cost flow problem on a derived transportation network.

Primary API:
    wasserstein_1d() - Distance between two 1D histograms
    wasserstein_2d() - Distance between two 2D histograms
    transport_1d(), transport_2d() - Distance plus the solved network
    transport_plan() - Cell-to-cell moves of a solved network
    FlowNetwork, solve_min_cost_flow() - Build and solve networks directly

Example:
    from wasserstein import wasserstein_1d, wasserstein_2d

    wasserstein_1d([2, 1, 0, 0, 3, 0, 4], [0, 5, 3, 0, 2, 0, 0])  # 22
    wasserstein_2d([[3, 0], [0, 0]], [[0, 0], [0, 3]])  # 6
"""

from __future__ import annotations

from wasserstein import logging
from wasserstein._version import __version__
from wasserstein.algorithms.min_cost_flow import solve_min_cost_flow
from wasserstein.config import I32_MAX, SOLVER_CONFIG, SolverConfig
from wasserstein.distance import (
    extract_distance,
    transport_1d,
    transport_2d,
    transport_plan,
    wasserstein_1d,
    wasserstein_2d,
)
from wasserstein.errors import (
    InfeasibleNetworkError,
    InvalidHistogramError,
    MassOverflowError,
    ShapeMismatchError,
    SolverIntegrityError,
    UnbalancedMassError,
    WassersteinError,
)
from wasserstein.graph.network import Edge, FlowNetwork, Vertex
from wasserstein.histogram.builders import build_1d_network, build_2d_network
from wasserstein.types import FlowSolution, TransportResult

__all__ = [
    # Version
    "__version__",
    # Distance (primary API)
    "wasserstein_1d",
    "wasserstein_2d",
    "transport_1d",
    "transport_2d",
    "transport_plan",
    "extract_distance",
    # Network model and solver
    "Vertex",
    "Edge",
    "FlowNetwork",
    "build_1d_network",
    "build_2d_network",
    "solve_min_cost_flow",
    # Results
    "FlowSolution",
    "TransportResult",
    # Configuration
    "SolverConfig",
    "SOLVER_CONFIG",
    "I32_MAX",
    # Errors
    "WassersteinError",
    "ShapeMismatchError",
    "UnbalancedMassError",
    "MassOverflowError",
    "InvalidHistogramError",
    "InfeasibleNetworkError",
    "SolverIntegrityError",
    # Utilities
    "logging",
]
