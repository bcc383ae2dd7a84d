import pytest
import numpy as np
import matplotlib.pyplot as plt

from opto.core.assets import Asset, AssetRegistry, default_assets
from opto.core.metrics import score_population
from opto.core.sampler import generate_population


@pytest.fixture(scope='session', autouse=True)
def setup_matplotlib():
    """Configure matplotlib for testing"""
    plt.switch_backend('Agg')


@pytest.fixture
def four_assets():
    """The reference four-asset portfolio, equal weights"""
    return default_assets()


@pytest.fixture
def registry():
    return AssetRegistry()


@pytest.fixture
def seeded_population(four_assets):
    """1000 scored portfolios over the four reference assets"""
    weights = generate_population(four_assets, 1000, np.random.default_rng(42))
    return score_population(weights, four_assets)


@pytest.fixture
def zero_risk_assets():
    """Assets whose portfolios all have zero risk"""
    return [
        Asset('Cash', 0.03, 0.0, 0.5),
        Asset('T-Bill', 0.01, 0.0, 0.5),
    ]
