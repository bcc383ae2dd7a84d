"""
Opto - Sampled Mean-Variance Portfolio Explorer
===============================================

Approximates the efficient frontier of a small portfolio by random
sampling and picks the allocation that maximizes mean-variance utility.

Usage:
    from opto import OptoSession, OptoConfig
    from opto.visualization import plot_population

Classes:
    OptoSession - Registry, cached population and optimizer for one user
    AssetRegistry - Ordered assets with field-level edits
    OptoConfig - Session assumptions (risk-free rate, population size, ...)
    AssetLoader - Asset tables from CSV/Excel

Functions:
    generate_population - Random weight vectors on the simplex
    compute_metrics - Expected return and risk of a weight vector
    compute_sharpe - Sharpe ratio
    optimize - Utility-maximizing candidate of a population
    handle_request - Stateless sample-and-optimize call
"""

from opto.core import (
    Asset,
    AssetLoader,
    AssetRegistry,
    OptoConfig,
    OptoError,
    OptoSession,
    PortfolioCandidate,
    ValidationError,
    compute_metrics,
    compute_sharpe,
    generate_population,
    handle_request,
    optimize,
)

__version__ = "1.0.0"

__all__ = [
    "Asset",
    "AssetLoader",
    "AssetRegistry",
    "OptoConfig",
    "OptoError",
    "OptoSession",
    "PortfolioCandidate",
    "ValidationError",
    "compute_metrics",
    "compute_sharpe",
    "generate_population",
    "handle_request",
    "optimize",
]
