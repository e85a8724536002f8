"""Min-cost flow algorithms."""

from wasserstein.algorithms.min_cost_flow import solve_min_cost_flow
from wasserstein.algorithms.residual import ResidualGraph
from wasserstein.algorithms.spf import resolve_path, spf

__all__ = ["ResidualGraph", "resolve_path", "solve_min_cost_flow", "spf"]
