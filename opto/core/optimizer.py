"""
Utility Optimizer
=================

Selects the best portfolio from a sampled population under mean-variance
utility:

    U = mu_p - 0.5 * A * risk_p^2

where A is the risk-aversion coefficient. Higher A shifts the choice toward
lower-risk candidates.

Theory Background:
------------------
No solver is involved. The optimizer is a linear scan over the candidates:
the running best starts at the first candidate and is replaced only by a
strictly greater utility, so ties keep the earlier candidate and the result
is always one of the inputs. For a fixed population, the chosen risk can
never increase when A increases.

The sampled cloud also approximates the efficient frontier: its upper-left
envelope is the set of candidates that earn more than every less risky
candidate.
"""

import logging
from typing import List, Sequence

from opto.core.metrics import PortfolioCandidate

logger = logging.getLogger(__name__)


def utility(candidate: PortfolioCandidate, risk_aversion: float) -> float:
    """Mean-variance utility: mu_p - 0.5 * A * risk_p^2"""
    return candidate.expected_return - 0.5 * risk_aversion * candidate.risk ** 2


def optimize(
    population: Sequence[PortfolioCandidate],
    risk_aversion: float
) -> PortfolioCandidate:
    """
    Return the utility-maximizing candidate of ``population``.

    Args:
        population: Scored candidates
        risk_aversion: Risk-aversion coefficient (no range check)

    Returns:
        The first candidate with the highest utility

    Raises:
        ValueError: If the population is empty
    """
    if len(population) == 0:
        raise ValueError("Cannot optimize an empty population; sample portfolios first")

    best = population[0]
    best_utility = utility(best, risk_aversion)
    for candidate in population[1:]:
        u = utility(candidate, risk_aversion)
        if u > best_utility:
            best, best_utility = candidate, u

    logger.debug(
        f"Selected portfolio: return={best.expected_return:.6f}, "
        f"risk={best.risk:.6f}, utility={best_utility:.6f} (A={risk_aversion})"
    )
    return best


def apply_candidate(registry, candidate: PortfolioCandidate) -> None:
    """Write the candidate's weights into the registry, one-to-one by index."""
    registry.apply_weights(candidate.weights)


def efficient_envelope(population: Sequence[PortfolioCandidate]) -> List[PortfolioCandidate]:
    """
    Approximate the efficient frontier from a sampled population.

    Returns the candidates, ordered by increasing risk, whose expected
    return is strictly greater than that of every less risky candidate.
    """
    ordered = sorted(population, key=lambda c: (c.risk, -c.expected_return))

    frontier = []
    best_return = None
    for candidate in ordered:
        if best_return is None or candidate.expected_return > best_return:
            frontier.append(candidate)
            best_return = candidate.expected_return
    return frontier
