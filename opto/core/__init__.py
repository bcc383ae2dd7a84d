"""Core computational modules for portfolio sampling and optimization."""

from opto.core.assets import Asset, AssetRegistry, OptoError, ValidationError, default_assets
from opto.core.config import OptoConfig
from opto.core.loader import AssetLoader, load_assets, population_to_frame, save_population_csv
from opto.core.metrics import PortfolioCandidate, compute_metrics, compute_sharpe, score_population
from opto.core.optimizer import apply_candidate, efficient_envelope, optimize, utility
from opto.core.sampler import generate_population
from opto.core.session import OptoSession, PopulationCache, handle_request

__all__ = [
    "Asset",
    "AssetRegistry",
    "OptoError",
    "ValidationError",
    "default_assets",
    "OptoConfig",
    "AssetLoader",
    "load_assets",
    "population_to_frame",
    "save_population_csv",
    "PortfolioCandidate",
    "compute_metrics",
    "compute_sharpe",
    "score_population",
    "apply_candidate",
    "efficient_envelope",
    "optimize",
    "utility",
    "generate_population",
    "OptoSession",
    "PopulationCache",
    "handle_request",
]
