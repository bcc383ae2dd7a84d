"""
Portfolio Metrics Calculator
============================

Expected return, risk and Sharpe ratio for a weight vector.

Risk here is NOT the covariance quadratic form. Assets are treated as
uncorrelated and their weighted risks are combined as an L2 norm:

    risk_p = sqrt( sum_i (w_i * risk_i)^2 )

Changing this formula changes every downstream optimization result.
"""

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

DEFAULT_RISK_FREE_RATE = 0.02


@dataclass(frozen=True)
class PortfolioCandidate:
    """A sampled portfolio and its metrics."""

    weights: np.ndarray
    expected_return: float
    risk: float
    sharpe_ratio: float

    def __post_init__(self):
        weights = np.array(self.weights, dtype=float)
        weights.setflags(write=False)
        object.__setattr__(self, 'weights', weights)

    def __eq__(self, other):
        if not isinstance(other, PortfolioCandidate):
            return NotImplemented
        return (
            np.array_equal(self.weights, other.weights)
            and self.expected_return == other.expected_return
            and self.risk == other.risk
            and (self.sharpe_ratio == other.sharpe_ratio
                 or (math.isnan(self.sharpe_ratio) and math.isnan(other.sharpe_ratio)))
        )

    __hash__ = None


def compute_metrics(weights: Sequence[float], assets: Sequence) -> Tuple[float, float]:
    """
    Calculate expected return and risk of a portfolio.

    Formula:
        mu_p   = sum(w_i * mu_i)
        risk_p = sqrt(sum((w_i * risk_i)^2))

    ``weights`` and ``assets`` must be index-aligned; lengths are not checked.

    Args:
        weights: Portfolio weights
        assets: Objects with ``expected_return`` and ``risk`` attributes

    Returns:
        Tuple of (expected_return, risk)
    """
    w = np.asarray(weights, dtype=float)
    mu = np.array([a.expected_return for a in assets], dtype=float)
    sigma = np.array([a.risk for a in assets], dtype=float)

    expected_return = float(np.dot(w, mu))
    risk = float(np.sqrt(np.sum((w * sigma) ** 2)))
    return expected_return, risk


def compute_sharpe(
    expected_return: float,
    risk: float,
    risk_free_rate: float = DEFAULT_RISK_FREE_RATE
) -> float:
    """
    Calculate the Sharpe ratio: (mu_p - rf) / risk_p

    A zero risk gives +inf or -inf following the sign of the excess return,
    and nan when the excess return is zero too.
    """
    excess = expected_return - risk_free_rate
    if risk == 0:
        if excess == 0:
            return math.nan
        return math.copysign(math.inf, excess)
    return excess / risk


def score_portfolio(
    weights: Sequence[float],
    assets: Sequence,
    risk_free_rate: float = DEFAULT_RISK_FREE_RATE
) -> PortfolioCandidate:
    """Build a ``PortfolioCandidate`` for one weight vector."""
    ret, risk = compute_metrics(weights, assets)
    return PortfolioCandidate(
        weights=weights,
        expected_return=ret,
        risk=risk,
        sharpe_ratio=compute_sharpe(ret, risk, risk_free_rate),
    )


def score_population(
    population: Sequence[Sequence[float]],
    assets: Sequence,
    risk_free_rate: float = DEFAULT_RISK_FREE_RATE
) -> List[PortfolioCandidate]:
    """Score every weight vector of a sampled population."""
    return [score_portfolio(w, assets, risk_free_rate) for w in population]


def format_ratio(value: float, precision: int = 4) -> str:
    """Format a possibly non-finite ratio for reports and logs."""
    if math.isnan(value):
        return "nan"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return f"{value:.{precision}f}"
