"""Test suite for the utility optimizer"""

import pytest
import numpy as np

from opto.core.assets import AssetRegistry, default_assets
from opto.core.metrics import PortfolioCandidate, compute_metrics, score_population
from opto.core.optimizer import apply_candidate, efficient_envelope, optimize, utility
from opto.core.sampler import generate_population


def make_candidate(ret, risk, weights=(0.5, 0.5)):
    return PortfolioCandidate(np.array(weights), ret, risk, 0.0)


# ================== utility ==================
def test_utility_formula():
    candidate = make_candidate(0.10, 0.20)
    assert utility(candidate, 2.0) == pytest.approx(0.10 - 0.5 * 2.0 * 0.04)
    assert utility(candidate, 0.0) == pytest.approx(0.10)


# ================== optimize ==================
def test_empty_population_raises():
    with pytest.raises(ValueError, match="empty population"):
        optimize([], 2.0)


def test_returns_member_of_population(seeded_population):
    best = optimize(seeded_population, 3.0)
    assert any(best is c for c in seeded_population)


def test_single_candidate():
    only = make_candidate(0.05, 0.1)
    assert optimize([only], 5.0) is only


def test_tie_keeps_first_seen():
    first = make_candidate(0.10, 0.20, (0.6, 0.4))
    second = make_candidate(0.10, 0.20, (0.4, 0.6))
    assert optimize([first, second], 4.0) is first


def test_strictly_better_later_candidate_wins():
    low = make_candidate(0.05, 0.10)
    high = make_candidate(0.09, 0.10)
    assert optimize([low, high], 2.0) is high


def test_determinism(seeded_population):
    a = optimize(seeded_population, 2.5)
    b = optimize(seeded_population, 2.5)
    assert a == b


@pytest.mark.parametrize("risk_aversion", [1.0, 2.0, 5.5, 10.0])
def test_selected_utility_is_maximal(seeded_population, risk_aversion):
    best = optimize(seeded_population, risk_aversion)
    best_u = utility(best, risk_aversion)
    assert all(best_u >= utility(c, risk_aversion) for c in seeded_population)


def test_zero_risk_aversion_picks_highest_return(seeded_population):
    best = optimize(seeded_population, 0.0)
    assert best.expected_return == max(c.expected_return for c in seeded_population)


def test_risk_aversion_out_of_range_is_accepted(seeded_population):
    optimize(seeded_population, 50.0)
    optimize(seeded_population, -1.0)


def test_higher_risk_aversion_never_increases_risk():
    """For any fixed population, risk at A=10 is at most risk at A=1"""
    assets = default_assets()
    for seed in range(25):
        weights = generate_population(assets, 500, seed)
        population = score_population(weights, assets)

        risks = [optimize(population, a).risk for a in np.arange(1.0, 10.01, 0.5)]

        assert optimize(population, 10.0).risk <= optimize(population, 1.0).risk
        assert all(later <= earlier for earlier, later in zip(risks, risks[1:]))


# ================== apply ==================
def test_apply_round_trip_is_exact(seeded_population):
    """Metrics recomputed from the registry match the winner exactly"""
    registry = AssetRegistry()
    best = optimize(seeded_population, 2.0)

    apply_candidate(registry, best)

    np.testing.assert_array_equal(registry.weights, best.weights)
    assert compute_metrics(registry.weights, registry) == (best.expected_return, best.risk)


def test_apply_only_touches_weights(seeded_population):
    registry = AssetRegistry()
    before = registry.snapshot_key()
    apply_candidate(registry, seeded_population[0])
    assert registry.snapshot_key() == before
    assert registry.names == ['Stock A', 'Stock B', 'Bond C', 'Real Estate D']


# ================== envelope ==================
def test_envelope_is_increasing(seeded_population):
    frontier = efficient_envelope(seeded_population)

    assert len(frontier) > 1
    risks = [c.risk for c in frontier]
    returns = [c.expected_return for c in frontier]
    assert risks == sorted(risks)
    assert all(b > a for a, b in zip(returns, returns[1:]))


def test_envelope_dominates_population(seeded_population):
    frontier = efficient_envelope(seeded_population)
    for c in seeded_population:
        assert any(f.risk <= c.risk and f.expected_return >= c.expected_return
                   for f in frontier)


def test_envelope_contains_minimum_risk_candidate(seeded_population):
    frontier = efficient_envelope(seeded_population)
    assert frontier[0].risk == min(c.risk for c in seeded_population)


def test_envelope_of_empty_population():
    assert efficient_envelope([]) == []
