"""Test suite for plots"""

import pytest
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from opto.core.assets import AssetRegistry
from opto.core.config import OptoConfig
from opto.core.session import OptoSession
from opto.visualization import plot_allocation, plot_population, plot_weights


@pytest.fixture
def session():
    return OptoSession(config=OptoConfig(seed=3, population_size=150))


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close('all')


def test_plot_population(session, tmp_path):
    path = tmp_path / "population.png"
    fig = plot_population(session, save_path=str(path))

    assert isinstance(fig, Figure)
    assert path.exists()


def test_plot_population_with_undefined_sharpe(zero_risk_assets):
    """Zero-risk candidates have infinite Sharpe ratios and still plot"""
    session = OptoSession(AssetRegistry(zero_risk_assets), OptoConfig(seed=1, population_size=50))
    fig = plot_population(session)
    assert isinstance(fig, Figure)


def test_plot_population_without_extras(session):
    fig = plot_population(session, show_frontier=False, show_current=False, show_assets=False)
    assert len(fig.axes) >= 1


def test_plot_allocation(session, tmp_path):
    path = tmp_path / "allocation.png"
    session.optimize()
    fig = plot_allocation(session.allocation(), save_path=str(path))

    assert isinstance(fig, Figure)
    assert path.exists()


def test_plot_allocation_skips_non_positive_weights():
    fig = plot_allocation([('A', 0.0), ('B', float('nan')), ('C', 1.0)])
    assert isinstance(fig, Figure)


def test_plot_allocation_all_zero():
    fig = plot_allocation([('A', 0.0), ('B', 0.0)])
    assert isinstance(fig, Figure)


def test_plot_weights(session):
    fig = plot_weights(session.registry.weights, session.registry.names)
    assert isinstance(fig, Figure)
