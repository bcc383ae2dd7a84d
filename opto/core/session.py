"""
Portfolio Session
=================

Ties the registry, sampler, metrics and optimizer together for one user.

The session owns its AssetRegistry (single writer) and memoizes the sampled
population on the values it depends on: each asset's expected return and
risk, the population size and the risk-free rate. Renaming an asset,
applying optimized weights, or moving the risk-aversion control reuses the
cached population; editing a return or a risk re-samples it.

``handle_request`` exposes the same pipeline as a stateless call: each
request gets its own registry snapshot, so nothing is shared between calls.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from opto.core.assets import AssetRegistry, ValidationError, parse_numeric
from opto.core.config import OptoConfig
from opto.core.metrics import PortfolioCandidate, compute_metrics, format_ratio, score_population
from opto.core.optimizer import apply_candidate, efficient_envelope, optimize
from opto.core.sampler import RandomState, generate_population, make_rng


class PopulationCache:
    """Scored population keyed by the registry's return/risk snapshot."""

    def __init__(self):
        self._key = None
        self._population: Optional[List[PortfolioCandidate]] = None
        self.samples_drawn = 0

    def get(
        self,
        registry: AssetRegistry,
        population_size: int,
        risk_free_rate: float,
        rng: RandomState = None
    ) -> List[PortfolioCandidate]:
        key = (registry.snapshot_key(), population_size, risk_free_rate)
        if self._population is None or key != self._key:
            weights = generate_population(registry, population_size, rng)
            self._population = score_population(weights, registry, risk_free_rate)
            self._key = key
            self.samples_drawn += 1
        return self._population

    def invalidate(self) -> None:
        self._key = None
        self._population = None


class OptoSession:
    """
    Interactive portfolio session.

    Attributes:
        config (OptoConfig): Session assumptions
        registry (AssetRegistry): Assets being explored
        risk_aversion (float): Current risk-aversion coefficient

    Example:
        >>> session = OptoSession(config=OptoConfig(seed=7))
        >>> best = session.optimize()
        >>> [name for name, _ in session.allocation()]
        ['Stock A', 'Stock B', 'Bond C', 'Real Estate D']
    """

    def __init__(
        self,
        registry: Optional[AssetRegistry] = None,
        config: Optional[OptoConfig] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.config = config if config is not None else OptoConfig()
        self.registry = registry if registry is not None else AssetRegistry()
        self.registry.strict = self.config.strict
        self.risk_aversion = self.config.risk_aversion
        self.logger = logger if logger is not None else logging.getLogger(__name__)

        self._rng = make_rng(self.config.seed)
        self._cache = PopulationCache()
        self.last_result: Optional[PortfolioCandidate] = None

    @property
    def population(self) -> List[PortfolioCandidate]:
        """Scored candidates, re-sampled only when asset return/risk changed."""
        before = self._cache.samples_drawn
        population = self._cache.get(
            self.registry,
            self.config.population_size,
            self.config.risk_free_rate,
            self._rng
        )
        if self._cache.samples_drawn != before:
            self.logger.info(
                f"Sampled {len(population)} portfolios over {len(self.registry)} assets"
            )
        return population

    @property
    def samples_drawn(self) -> int:
        return self._cache.samples_drawn

    def update_field(self, index: int, field: str, value: Any) -> None:
        """Edit one field of one asset (see AssetRegistry.update_field)."""
        self.registry.update_field(index, field, value)
        self.logger.info(f"Asset {index}: {field} set to {getattr(self.registry[index], field)!r}")

    def set_risk_aversion(self, value: Any) -> float:
        """Set the risk-aversion coefficient; does not touch the population."""
        parsed = parse_numeric(value, 'risk_aversion', strict=True)
        self.risk_aversion = parsed
        return parsed

    def optimize(self) -> PortfolioCandidate:
        """
        Pick the utility-maximizing candidate and apply it to the registry.

        Returns:
            The winning candidate
        """
        best = optimize(self.population, self.risk_aversion)
        apply_candidate(self.registry, best)
        self.last_result = best

        self.logger.info(
            f"Optimized (A={self.risk_aversion:.1f}): "
            f"return={best.expected_return*100:.2f}%, risk={best.risk*100:.2f}%, "
            f"Sharpe={format_ratio(best.sharpe_ratio)}"
        )
        return best

    def current_metrics(self) -> Tuple[float, float]:
        """(expected_return, risk) of the registry's live weights."""
        return compute_metrics(self.registry.weights, self.registry)

    def allocation(self) -> List[Tuple[str, float]]:
        """(name, weight) pairs for the allocation chart."""
        return [(a.name, a.weight) for a in self.registry]

    def scatter_points(self) -> List[Dict[str, float]]:
        """Population as percent risk/return points with Sharpe ratios."""
        return [
            {
                'risk': c.risk * 100,
                'return': c.expected_return * 100,
                'sharpe': c.sharpe_ratio,
            }
            for c in self.population
        ]

    def current_point(self) -> Dict[str, float]:
        """Current portfolio as a percent risk/return point."""
        ret, risk = self.current_metrics()
        return {'risk': risk * 100, 'return': ret * 100}

    def frontier(self) -> List[PortfolioCandidate]:
        """Upper-left envelope of the sampled population."""
        return efficient_envelope(self.population)

    def summary_report(self) -> str:
        """Generate a text report of the assets and current portfolio."""
        lines = []
        lines.append("=" * 70)
        lines.append("PORTFOLIO SESSION SUMMARY")
        lines.append("=" * 70)

        lines.append("\n--- Assets ---")
        lines.append(f"{'Asset':<16} {'Return':>10} {'Risk':>10} {'Weight':>10}")
        lines.append("-" * 50)
        for a in self.registry:
            lines.append(
                f"{a.name:<16} {a.expected_return*100:>9.2f}% "
                f"{a.risk*100:>9.2f}% {a.weight*100:>9.2f}%"
            )

        ret, risk = self.current_metrics()
        lines.append("\n--- Current Portfolio ---")
        lines.append(f"Expected Return: {ret*100:.2f}%")
        lines.append(f"Risk: {risk*100:.2f}%")
        lines.append(f"Risk Aversion: {self.risk_aversion:.1f}")
        lines.append(f"Sampled Portfolios: {len(self.population)}")

        lines.append("\n" + "=" * 70)
        return "\n".join(lines)


def _parse_population_size(value: Any) -> int:
    if isinstance(value, bool):
        raise ValidationError('population_size', value)
    try:
        size = int(value)
    except (TypeError, ValueError):
        raise ValidationError('population_size', value) from None
    if size != value and not (isinstance(value, str) and value.strip() == str(size)):
        raise ValidationError('population_size', value)
    if size <= 0:
        raise ValidationError('population_size', value, "population_size must be positive")
    return size


def _parse_seed(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < 0:
        raise ValidationError('seed', value, "seed must be a non-negative integer")
    return int(value)


def handle_request(
    request: Dict[str, Any],
    config: Optional[OptoConfig] = None
) -> Dict[str, Any]:
    """
    Run one sample-and-optimize request over a snapshot of its assets.

    Request:
        {assets: [{name, expected_return, risk, weight}], risk_aversion,
         population_size, seed?, risk_free_rate?}

    Response:
        {optimized_weights: [...], population: [{risk, return, sharpe}, ...]}

    Risk and return in the response are fractions, not percent.

    Raises:
        ValidationError: If the request is malformed
    """
    base = config if config is not None else OptoConfig()
    if not isinstance(request, dict):
        raise ValidationError('request', request, "Request must be a mapping")

    records = request.get('assets')
    if not isinstance(records, (list, tuple)) or len(records) == 0:
        raise ValidationError('assets', records, "Request must contain at least one asset")

    risk_aversion = parse_numeric(
        request.get('risk_aversion', base.risk_aversion), 'risk_aversion', strict=True
    )
    population_size = _parse_population_size(
        request.get('population_size', base.population_size)
    )
    risk_free_rate = parse_numeric(
        request.get('risk_free_rate', base.risk_free_rate), 'risk_free_rate', strict=True
    )

    request_config = OptoConfig(
        risk_free_rate=risk_free_rate,
        population_size=population_size,
        risk_aversion=risk_aversion,
        parse_policy=base.parse_policy,
        seed=_parse_seed(request.get('seed', base.seed)),
    )
    registry = AssetRegistry.from_records(records, strict=request_config.strict)

    session = OptoSession(registry, request_config)
    best = session.optimize()

    return {
        'optimized_weights': [float(w) for w in best.weights],
        'population': [
            {
                'risk': c.risk,
                'return': c.expected_return,
                'sharpe': c.sharpe_ratio,
            }
            for c in session.population
        ],
    }
