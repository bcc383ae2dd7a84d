"""
Configuration for portfolio sampling and optimization.
======================================================

All user-configurable assumptions live on ``OptoConfig`` so the session,
the loader and the command-line tools share one set of defaults.

ASSUMPTIONS (User-Configurable):
--------------------------------
1. RISK-FREE RATE: 2% per period, used only for the Sharpe ratio.
2. POPULATION SIZE: 1000 random portfolios per sampling pass.
3. RISK AVERSION: 2.0 by default; input controls accept 1 to 10 in 0.1 steps.
4. PARSE POLICY: 'lenient' keeps the leading number of a malformed edit
   ("5%" -> 5) or uses 0 when there is none, 'strict' rejects it with a
   ValidationError.
"""

from typing import Optional, Tuple

import numpy as np


class OptoConfig:
    """
    Stores all configurable assumptions for a portfolio session.

    Attributes:
        risk_free_rate: Risk-free rate used for Sharpe ratios (decimal)
        population_size: Number of random portfolios sampled per pass
        risk_aversion: Coefficient penalising risk in the utility function
        parse_policy: 'lenient' or 'strict' handling of numeric edits
        seed: Optional seed for reproducible sampling
    """

    PARSE_POLICIES = ('lenient', 'strict')

    RISK_AVERSION_RANGE: Tuple[float, float] = (1.0, 10.0)
    RISK_AVERSION_STEP = 0.1

    def __init__(
        self,
        risk_free_rate: float = 0.02,
        population_size: int = 1000,
        risk_aversion: float = 2.0,
        parse_policy: str = 'lenient',
        seed: Optional[int] = None
    ):
        self.risk_free_rate = risk_free_rate
        self.population_size = population_size
        self.risk_aversion = risk_aversion
        self.parse_policy = parse_policy
        self.seed = seed

        self.validate()

    @property
    def strict(self) -> bool:
        """True when malformed numeric input is rejected instead of zeroed."""
        return self.parse_policy == 'strict'

    def validate(self) -> None:
        """Validate configuration parameters."""
        if self.parse_policy not in self.PARSE_POLICIES:
            raise ValueError(
                f"Unknown parse policy: {self.parse_policy}. "
                f"Use one of {', '.join(self.PARSE_POLICIES)}"
            )
        size = self.population_size
        if isinstance(size, bool) or not isinstance(size, (int, np.integer)):
            raise ValueError("population_size must be an integer")
        if size <= 0:
            raise ValueError("population_size must be positive")

    def summary(self) -> str:
        """Format the current configuration as a report block."""
        lo, hi = self.RISK_AVERSION_RANGE
        lines = [
            "=" * 60,
            "CURRENT SESSION CONFIGURATION",
            "=" * 60,
            f"Risk-Free Rate: {self.risk_free_rate*100:.2f}%",
            f"Population Size: {self.population_size}",
            f"Risk Aversion: {self.risk_aversion:.1f} (input range {lo:.0f}-{hi:.0f})",
            f"Parse Policy: {self.parse_policy}",
            f"Seed: {self.seed if self.seed is not None else 'random'}",
            "=" * 60,
        ]
        return "\n".join(lines)
