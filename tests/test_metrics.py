"""Test suite for portfolio metrics"""

import dataclasses
import math

import pytest
import numpy as np

from opto.core.assets import Asset
from opto.core.metrics import (
    PortfolioCandidate,
    compute_metrics,
    compute_sharpe,
    format_ratio,
    score_population,
    score_portfolio,
)


# ================== compute_metrics ==================
@pytest.mark.parametrize("index", [0, 1, 2, 3])
def test_single_asset_portfolio_is_exact(four_assets, index):
    """A one-hot weight vector reproduces that asset's return and risk"""
    weights = [0.0] * 4
    weights[index] = 1.0

    ret, risk = compute_metrics(weights, four_assets)

    assert ret == four_assets[index].expected_return
    assert risk == four_assets[index].risk


def test_degenerate_single_asset_scenario(four_assets):
    ret, risk = compute_metrics([1, 0, 0, 0], four_assets)
    assert ret == 0.10
    assert risk == 0.20


def test_equal_weight_baseline(four_assets):
    """Four assets at 25% each"""
    ret, risk = compute_metrics([0.25, 0.25, 0.25, 0.25], four_assets)

    assert ret == pytest.approx(0.095)
    expected_risk = math.sqrt(0.05 ** 2 + 0.0625 ** 2 + 0.025 ** 2 + 0.0375 ** 2)
    assert risk == pytest.approx(expected_risk)
    assert risk == pytest.approx(0.0918559, abs=1e-6)


def test_risk_is_l2_norm_not_linear_sum():
    assets = [Asset('A', 0.1, 0.3), Asset('B', 0.1, 0.4)]
    _, risk = compute_metrics([0.5, 0.5], assets)
    assert risk == pytest.approx(0.25)


def test_metrics_return_python_floats(four_assets):
    ret, risk = compute_metrics(np.array([0.25] * 4), four_assets)
    assert type(ret) is float
    assert type(risk) is float


# ================== compute_sharpe ==================
def test_sharpe_default_risk_free_rate():
    assert compute_sharpe(0.10, 0.20) == pytest.approx(0.4)


def test_sharpe_custom_risk_free_rate():
    assert compute_sharpe(0.10, 0.20, risk_free_rate=0.0) == pytest.approx(0.5)


def test_sharpe_zero_risk_is_non_finite():
    assert compute_sharpe(0.05, 0.0) == math.inf
    assert compute_sharpe(0.01, 0.0) == -math.inf
    assert math.isnan(compute_sharpe(0.02, 0.0))


def test_format_ratio_handles_non_finite():
    assert format_ratio(math.inf) == "inf"
    assert format_ratio(-math.inf) == "-inf"
    assert format_ratio(math.nan) == "nan"
    assert format_ratio(0.123456, 2) == "0.12"


# ================== Candidates ==================
def test_score_portfolio(four_assets):
    candidate = score_portfolio([0.25] * 4, four_assets)

    assert candidate.expected_return == pytest.approx(0.095)
    assert candidate.sharpe_ratio == pytest.approx((0.095 - 0.02) / candidate.risk)
    np.testing.assert_array_equal(candidate.weights, [0.25] * 4)


def test_candidate_is_immutable(four_assets):
    candidate = score_portfolio([0.25] * 4, four_assets)

    with pytest.raises(dataclasses.FrozenInstanceError):
        candidate.risk = 0.0
    with pytest.raises(ValueError):
        candidate.weights[0] = 1.0


def test_candidate_copies_weights(four_assets):
    weights = np.array([0.25] * 4)
    candidate = score_portfolio(weights, four_assets)
    weights[0] = 0.9
    assert candidate.weights[0] == 0.25


def test_candidate_equality_by_value():
    a = PortfolioCandidate(np.array([0.5, 0.5]), 0.1, 0.2, math.nan)
    b = PortfolioCandidate([0.5, 0.5], 0.1, 0.2, math.nan)
    c = PortfolioCandidate([0.4, 0.6], 0.1, 0.2, math.nan)
    assert a == b
    assert a != c


def test_score_population_with_zero_risk(zero_risk_assets):
    """Zero-risk portfolios score without raising"""
    population = score_population([[0.9, 0.1], [0.1, 0.9]], zero_risk_assets)

    assert population[0].risk == 0.0
    assert population[0].sharpe_ratio == math.inf
    assert population[1].sharpe_ratio == -math.inf
