"""Histogram validation and network builders."""

from wasserstein.histogram.builders import build_1d_network, build_2d_network
from wasserstein.histogram.validation import as_histogram, validate_pair

__all__ = ["as_histogram", "build_1d_network", "build_2d_network", "validate_pair"]
