"""
Random Portfolio Sampler
========================

Generates candidate weight vectors on the probability simplex.

Each candidate draws one uniform number per asset and divides by the row
sum, so every weight is strictly positive and the weights sum to 1. This is
not uniform over the simplex (it favours balanced portfolios), which is
fine for approximating the feasible risk/return region.
"""

import warnings
from typing import List, Optional, Sequence, Union

import numpy as np

RandomState = Optional[Union[int, np.random.Generator]]

MAX_REDRAWS = 10


def make_rng(rng: RandomState = None) -> np.random.Generator:
    """Return ``rng`` if it is a Generator, otherwise seed a new one."""
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


def generate_population(
    assets: Sequence,
    count: int,
    rng: RandomState = None
) -> List[np.ndarray]:
    """
    Sample ``count`` random long-only portfolios.

    Rows with a zero draw are redrawn; after MAX_REDRAWS attempts any row
    still containing a zero is replaced by the equal-weight vector.

    Args:
        assets: Asset sequence (only its length is used)
        count: Number of weight vectors to generate
        rng: Generator, integer seed, or None for fresh entropy

    Returns:
        List of weight vectors, each of length len(assets)

    Raises:
        ValueError: If there are no assets or count is not positive
    """
    n_assets = len(assets)
    if n_assets == 0:
        raise ValueError("Cannot sample portfolios for an empty asset list")
    if isinstance(count, bool) or not isinstance(count, (int, np.integer)) or count <= 0:
        raise ValueError(f"Population size must be a positive integer, got {count!r}")

    rng = make_rng(rng)
    draws = rng.random((count, n_assets))

    degenerate = np.any(draws <= 0.0, axis=1)
    attempts = 0
    while degenerate.any() and attempts < MAX_REDRAWS:
        draws[degenerate] = rng.random((int(degenerate.sum()), n_assets))
        degenerate = np.any(draws <= 0.0, axis=1)
        attempts += 1

    if degenerate.any():
        warnings.warn(
            f"{int(degenerate.sum())} degenerate draws replaced by equal weights"
        )
        draws[degenerate] = 1.0

    weights = draws / draws.sum(axis=1, keepdims=True)
    return list(weights)
