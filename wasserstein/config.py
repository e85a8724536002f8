"""Configuration for the min-cost flow solver."""

from dataclasses import dataclass
from typing import Optional

#: Largest magnitude the solver accepts for supplies, demands and costs.
#: Negative values stop at -I32_MAX, one short of the int32 minimum.
I32_MAX = 2**31 - 1

SOLVER_METHODS = ("ssp", "network_simplex")


@dataclass
class SolverConfig:
    """Options controlling how a flow network is solved."""

    # "ssp" (successive shortest paths) or "network_simplex" (NetworkX)
    method: str = "ssp"

    # Clamp supplies and costs into [-clamp_limit, clamp_limit] before solving
    clamp_values: bool = True
    clamp_limit: int = I32_MAX

    # Verify conservation and the reported cost after solving
    check_integrity: bool = True

    # Upper bound on augmenting paths; None means unbounded
    max_augmentations: Optional[int] = None

    def validate(self) -> None:
        """Raise ValueError if any option is out of range."""
        if self.method not in SOLVER_METHODS:
            raise ValueError(
                f"Unknown solver method '{self.method}'. "
                f"Expected one of: {', '.join(SOLVER_METHODS)}"
            )
        if self.clamp_limit <= 0:
            raise ValueError(f"clamp_limit must be positive, got {self.clamp_limit}")
        if self.max_augmentations is not None and self.max_augmentations <= 0:
            raise ValueError(
                f"max_augmentations must be positive, got {self.max_augmentations}"
            )

    def clamp(self, value: int) -> int:
        """Clamp ``value`` into ``[-clamp_limit, clamp_limit]`` when enabled.

        The range is symmetric on purpose: with the default limit it stops at
        -(2**31 - 1), not at the int32 minimum, so a clamped demand always has
        a representable matching supply.
        """
        if not self.clamp_values:
            return value
        return max(-self.clamp_limit, min(value, self.clamp_limit))


# Global configuration instance
SOLVER_CONFIG = SolverConfig()
