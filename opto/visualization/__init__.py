"""Visualization modules for portfolio sessions."""

from opto.visualization.plots import (
    plot_allocation,
    plot_population,
    plot_weights
)

__all__ = [
    "plot_allocation",
    "plot_population",
    "plot_weights",
]
