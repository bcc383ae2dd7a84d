"""
Plotting Module for Portfolio Sampling
======================================

Visualization functions for a portfolio session:
- Sampled population on the risk-return plane, coloured by Sharpe ratio
- Approximate efficient frontier (upper-left envelope of the samples)
- Current portfolio position
- Current allocation as a pie chart or bar chart

Sharpe ratios can be infinite or nan for zero-risk candidates; those points
are drawn in grey and left out of the colour scale.
"""

import math
from typing import List, Optional, Sequence, Tuple

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from opto.core.session import OptoSession

COLORS = ['#0088FE', '#00C49F', '#FFBB28', '#FF8042']


def plot_population(
    session: OptoSession,
    show_frontier: bool = True,
    show_current: bool = True,
    show_assets: bool = True,
    figsize: Tuple[int, int] = (12, 8),
    save_path: Optional[str] = None,
    title: str = "Sampled Portfolios and Approximate Efficient Frontier"
) -> Figure:
    """
    Scatter the sampled population of a session.

    Args:
        session: OptoSession with assets and a population
        show_frontier: If True, draw the upper-left envelope of the samples
        show_current: If True, mark the registry's current portfolio
        show_assets: If True, mark each single-asset portfolio
        figsize: Figure size (width, height)
        save_path: If provided, save the figure to this path
        title: Plot title

    Returns:
        matplotlib Figure object
    """
    fig, ax = plt.subplots(figsize=figsize)

    points = session.scatter_points()
    risks = np.array([p['risk'] for p in points])
    returns = np.array([p['return'] for p in points])
    sharpes = np.array([p['sharpe'] for p in points])
    finite = np.isfinite(sharpes)

    if finite.any():
        sc = ax.scatter(risks[finite], returns[finite], c=sharpes[finite],
                        cmap='viridis', s=12, alpha=0.7, label='Portfolios', zorder=2)
        fig.colorbar(sc, ax=ax, label='Sharpe Ratio')
    if (~finite).any():
        ax.scatter(risks[~finite], returns[~finite], c='grey', s=12, alpha=0.7,
                   label='Portfolios (undefined Sharpe)', zorder=2)

    if show_frontier:
        frontier = session.frontier()
        ax.plot([c.risk * 100 for c in frontier],
                [c.expected_return * 100 for c in frontier],
                'b-', linewidth=2, label='Approximate Efficient Frontier', zorder=3)

    if show_assets:
        for asset in session.registry:
            ax.scatter([asset.risk * 100], [asset.expected_return * 100],
                       c='red', s=80, marker='o', edgecolors='black', zorder=4)
            ax.annotate(asset.name,
                        (asset.risk * 100, asset.expected_return * 100),
                        xytext=(5, 5), textcoords='offset points',
                        fontsize=9, fontweight='bold')

    if show_current:
        current = session.current_point()
        ax.scatter([current['risk']], [current['return']],
                   c='#82ca9d', s=250, marker='*', edgecolors='black',
                   label=f"Current (σ={current['risk']:.2f}%, μ={current['return']:.2f}%)",
                   zorder=5)

    ax.set_xlabel('Risk %', fontsize=12)
    ax.set_ylabel('Expected Return %', fontsize=12)
    ax.set_title(title, fontsize=14, fontweight='bold')
    ax.legend(loc='upper left', fontsize=10)
    ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')

    return fig


def plot_allocation(
    allocation: Sequence[Tuple[str, float]],
    title: str = "Current Portfolio Allocation",
    figsize: Tuple[int, int] = (8, 8),
    save_path: Optional[str] = None
) -> Figure:
    """
    Pie chart of (name, weight) pairs.

    Non-positive and non-finite weights cannot be drawn as wedges and are
    left out.
    """
    fig, ax = plt.subplots(figsize=figsize)

    slices = [(name, w) for name, w in allocation if math.isfinite(w) and w > 0]
    if slices:
        names = [name for name, _ in slices]
        values = [w for _, w in slices]
        colors = [COLORS[i % len(COLORS)] for i in range(len(slices))]
        ax.pie(values, labels=names, colors=colors, autopct='%1.1f%%',
               startangle=90, wedgeprops={'edgecolor': 'white'})
        ax.axis('equal')
    else:
        ax.text(0.5, 0.5, 'No positive weights', ha='center', va='center',
                transform=ax.transAxes)
        ax.axis('off')

    ax.set_title(title, fontsize=14, fontweight='bold')

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')

    return fig


def plot_weights(
    weights: Sequence[float],
    asset_names: List[str],
    title: str = "Portfolio Weights",
    figsize: Tuple[int, int] = (10, 6),
    save_path: Optional[str] = None
) -> Figure:
    """
    Create a bar chart of portfolio weights.

    Args:
        weights: Array of portfolio weights
        asset_names: List of asset names
        title: Plot title
        figsize: Figure size
        save_path: Optional path to save figure

    Returns:
        matplotlib Figure object
    """
    fig, ax = plt.subplots(figsize=figsize)
    weights = np.asarray(weights, dtype=float)

    colors = [COLORS[i % len(COLORS)] for i in range(len(weights))]
    bars = ax.bar(asset_names, weights * 100, color=colors, edgecolor='black')

    for bar, w in zip(bars, weights):
        ax.annotate(f'{w*100:.1f}%',
                    xy=(bar.get_x() + bar.get_width() / 2, bar.get_height()),
                    xytext=(0, 3), textcoords='offset points',
                    ha='center', va='bottom', fontsize=10, fontweight='bold')

    ax.set_xlabel('Assets', fontsize=12)
    ax.set_ylabel('Weight %', fontsize=12)
    ax.set_title(title, fontsize=14, fontweight='bold')
    ax.grid(True, axis='y', alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')

    return fig
