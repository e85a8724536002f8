"""Exception types raised by histogram builders and the flow solver.

Caller errors (bad shapes, unbalanced mass, overflow, malformed input) derive
from ``ValueError``/``OverflowError`` as well as ``WassersteinError`` so they
can be handled with either. ``SolverIntegrityError`` signals a defect in the
solver itself and is not meant to be caught as routine control flow.
"""

from __future__ import annotations


class WassersteinError(Exception):
    """Base class for all package errors."""


class ShapeMismatchError(WassersteinError, ValueError):
    """Histograms have different lengths or matrices have different shapes."""


class UnbalancedMassError(WassersteinError, ValueError):
    """Total source mass differs from total sink mass."""


class MassOverflowError(WassersteinError, OverflowError):
    """Total mass exceeds the solver's safe integer range."""


class InvalidHistogramError(WassersteinError, ValueError):
    """Histogram entries are negative, non-integral, or the matrix is ragged."""


class InfeasibleNetworkError(WassersteinError):
    """Some supply cannot reach any remaining demand through the network."""


class SolverIntegrityError(WassersteinError, RuntimeError):
    """A solved network violates a post-solve invariant."""
