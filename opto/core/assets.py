"""
Asset Registry
==============

Holds the ordered list of assets a session works with. The order is
significant: every weight vector produced by the sampler is index-aligned
with it.

Users edit ``name``, ``expected_return`` and ``risk`` one field at a time.
``weight`` is never edited directly; it is only written when an optimized
portfolio is applied back onto the registry.
"""

import logging
import math
import re
from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np

logger = logging.getLogger(__name__)

NUMERIC_PREFIX = re.compile(r"\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


class OptoError(Exception):
    """Base class for errors raised by the portfolio engine."""


class ValidationError(OptoError, ValueError):
    """Raised when an input value is rejected for a named field."""

    def __init__(self, field: str, value: Any, message: Optional[str] = None):
        self.field = field
        self.value = value
        if message is None:
            message = f"Invalid value for '{field}': {value!r}"
        super().__init__(message)


EDITABLE_FIELDS = ('name', 'expected_return', 'risk')
NUMERIC_FIELDS = ('expected_return', 'risk')


@dataclass
class Asset:
    """One investable instrument or asset class."""

    name: str
    expected_return: float
    risk: float
    weight: float = 0.0


DEFAULT_ASSETS: Tuple[Tuple[str, float, float, float], ...] = (
    ('Stock A', 0.10, 0.20, 0.25),
    ('Stock B', 0.15, 0.25, 0.25),
    ('Bond C', 0.05, 0.10, 0.25),
    ('Real Estate D', 0.08, 0.15, 0.25),
)


def default_assets() -> List[Asset]:
    """Build a fresh copy of the reference four-asset portfolio."""
    return [Asset(*row) for row in DEFAULT_ASSETS]


def parse_numeric(value: Any, field: str, strict: bool = False) -> float:
    """
    Parse a raw numeric input for ``field``.

    Numbers pass through unchanged. Text is stripped and parsed as a float.
    In lenient mode, text that is not a number as a whole falls back to its
    leading numeric prefix ("12abc" -> 12.0, "5%" -> 5.0). Anything without
    a usable prefix, and any non-finite result, is either rejected
    (``strict``) or replaced by 0.0.

    Args:
        value: Raw input, usually text from an input control
        field: Name of the field being edited (used in errors)
        strict: If True, raise instead of coercing to 0

    Returns:
        Parsed float

    Raises:
        ValidationError: If strict and the value is not a finite number
    """
    try:
        if isinstance(value, bool):
            raise TypeError("booleans are not numeric input")
        if isinstance(value, str):
            parsed = float(value.strip())
        else:
            parsed = float(value)
    except (TypeError, ValueError):
        parsed = math.nan

    if math.isfinite(parsed):
        return parsed

    if strict:
        raise ValidationError(field, value)

    if isinstance(value, str):
        match = NUMERIC_PREFIX.match(value)
        if match:
            prefix = float(match.group(0))
            if math.isfinite(prefix):
                logger.warning(f"Parsed {field}={value!r} as {prefix}")
                return prefix

    logger.warning(f"Could not parse {field}={value!r}; using 0")
    return 0.0


class AssetRegistry:
    """
    Ordered, index-stable collection of assets.

    Attributes:
        assets (List[Asset]): The assets, in weight-vector order
        strict (bool): Reject malformed numeric edits instead of zeroing them

    Example:
        >>> registry = AssetRegistry()
        >>> registry.update_field(0, 'expected_return', '0.12')
        >>> registry[0].expected_return
        0.12
    """

    def __init__(self, assets: Optional[Iterable[Asset]] = None, strict: bool = False):
        if assets is None:
            assets = default_assets()
        self.assets = [Asset(**asdict(a)) for a in assets]
        self.strict = strict

    @classmethod
    def from_records(
        cls,
        records: Sequence[Dict[str, Any]],
        strict: bool = False
    ) -> "AssetRegistry":
        """
        Build a registry from dict records.

        Each record needs ``name``, ``expected_return`` (or ``return``) and
        ``risk``; ``weight`` is optional and defaults to an equal split.
        Numeric values go through the same parse policy as field edits.
        """
        n = len(records)
        assets = []
        for i, record in enumerate(records):
            if not isinstance(record, dict):
                raise ValidationError('assets', record, f"Asset record {i} is not a mapping")
            if 'expected_return' in record:
                raw_return = record['expected_return']
            elif 'return' in record:
                raw_return = record['return']
            else:
                raise ValidationError('expected_return', None,
                                      f"Asset record {i} has no expected_return")
            if 'risk' not in record:
                raise ValidationError('risk', None, f"Asset record {i} has no risk")

            weight = record.get('weight')
            assets.append(Asset(
                name=str(record.get('name', f"Asset_{i+1}")),
                expected_return=parse_numeric(raw_return, 'expected_return', strict),
                risk=parse_numeric(record['risk'], 'risk', strict),
                weight=1.0 / n if weight is None else parse_numeric(weight, 'weight', strict),
            ))
        return cls(assets, strict=strict)

    def __len__(self) -> int:
        return len(self.assets)

    def __iter__(self) -> Iterator[Asset]:
        return iter(self.assets)

    def __getitem__(self, index: int) -> Asset:
        return self.assets[index]

    @property
    def names(self) -> List[str]:
        return [a.name for a in self.assets]

    @property
    def expected_returns(self) -> np.ndarray:
        return np.array([a.expected_return for a in self.assets], dtype=float)

    @property
    def risks(self) -> np.ndarray:
        return np.array([a.risk for a in self.assets], dtype=float)

    @property
    def weights(self) -> np.ndarray:
        return np.array([a.weight for a in self.assets], dtype=float)

    def update_field(self, index: int, field: str, value: Any) -> None:
        """
        Update exactly one field of exactly one asset.

        Args:
            index: Position of the asset in the registry
            field: 'name', 'expected_return' or 'risk'
            value: Raw input; numeric fields are parsed per the policy

        Raises:
            ValidationError: For 'weight', unknown fields, or (strict) bad numbers
            IndexError: If index is out of range
        """
        if field not in EDITABLE_FIELDS:
            raise ValidationError(
                field, value,
                f"Field '{field}' is not editable; use one of {', '.join(EDITABLE_FIELDS)}"
            )
        if not 0 <= index < len(self.assets):
            raise IndexError(f"Asset index {index} out of range (0-{len(self.assets) - 1})")

        asset = self.assets[index]
        if field in NUMERIC_FIELDS:
            setattr(asset, field, parse_numeric(value, field, self.strict))
        else:
            asset.name = str(value)

    def apply_weights(self, weights: Sequence[float]) -> None:
        """
        Overwrite every asset's weight, one-to-one by index.

        This is the only place weights are written.
        """
        if len(weights) != len(self.assets):
            raise ValueError(
                f"Got {len(weights)} weights for {len(self.assets)} assets"
            )
        for asset, w in zip(self.assets, weights):
            asset.weight = float(w)

    def snapshot_key(self) -> Tuple[Tuple[float, float], ...]:
        """Value key of the fields the sampled population depends on."""
        return tuple((a.expected_return, a.risk) for a in self.assets)

    def copy(self) -> "AssetRegistry":
        return AssetRegistry(self.assets, strict=self.strict)

    def to_records(self) -> List[Dict[str, Any]]:
        return [asdict(a) for a in self.assets]
