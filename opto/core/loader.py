"""
Asset Table Loader
==================

Loads user-supplied asset point estimates from CSV or Excel files and
exports sampled populations.

Expected table layout (one row per asset):

    name | expected_return | risk | weight (optional)

``return`` is accepted as an alias for ``expected_return``. Column names are
matched case-insensitively. When the weight column is missing every asset
gets an equal weight.

These are point estimates typed in by the user; no statistics are derived
from price or return histories.
"""

import warnings
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from opto.core.assets import Asset, AssetRegistry, ValidationError, parse_numeric
from opto.core.metrics import PortfolioCandidate

COLUMN_ALIASES = {
    'name': 'name',
    'asset': 'name',
    'expected_return': 'expected_return',
    'return': 'expected_return',
    'risk': 'risk',
    'weight': 'weight',
}


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return bool(pd.isna(value))


class AssetLoader:
    """
    Loads asset tables into an AssetRegistry.

    Example:
        >>> loader = AssetLoader()
        >>> registry = loader.load_file("assets.csv")
    """

    def __init__(self, strict: bool = False):
        """
        Initialize the AssetLoader.

        Args:
            strict: Reject malformed numeric cells instead of zeroing them
        """
        self.strict = strict

    def load_file(self, file_path: Union[str, Path], sheet_name: Optional[str] = None) -> AssetRegistry:
        """
        Load assets from a CSV or Excel file.

        Args:
            file_path: Path to a .csv, .xlsx or .xls file
            sheet_name: Sheet to read for Excel files (default: first sheet)

        Returns:
            AssetRegistry with the file's assets
        """
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        if path.suffix.lower() in ['.xlsx', '.xls']:
            df = pd.read_excel(path, sheet_name=sheet_name if sheet_name else 0, dtype=object)
        elif path.suffix.lower() == '.csv':
            df = pd.read_csv(path, dtype=str, keep_default_na=False)
        else:
            raise ValueError(f"Unsupported file type: {path.suffix}")

        return self.load_frame(df)

    def load_frame(self, df: pd.DataFrame) -> AssetRegistry:
        """
        Build a registry from a DataFrame with the expected columns.

        Raises:
            ValidationError: If a required column is missing or the table is empty
        """
        renamed = {}
        for col in df.columns:
            key = str(col).strip().lower().replace(' ', '_')
            if key in COLUMN_ALIASES:
                renamed[col] = COLUMN_ALIASES[key]
        df = df.rename(columns=renamed)

        for required in ('name', 'expected_return', 'risk'):
            if required not in df.columns:
                raise ValidationError(required, None, f"Asset table has no '{required}' column")

        # Drop fully blank rows (trailing rows in spreadsheets)
        if not df.empty:
            blank = [all(_is_blank(v) for v in row) for row in df.itertuples(index=False)]
            df = df[[not b for b in blank]]
        if df.empty:
            raise ValidationError('assets', None, "Asset table contains no rows")

        n_assets = len(df)
        has_weight = 'weight' in df.columns
        assets = []
        for i, (_, row) in enumerate(df.iterrows()):
            name = row['name']
            if _is_blank(name):
                name = f"Asset_{i+1}"
            weight = row['weight'] if has_weight else None
            if _is_blank(weight):
                weight = 1.0 / n_assets
            assets.append(Asset(
                name=str(name).strip(),
                expected_return=parse_numeric(row['expected_return'], 'expected_return', self.strict),
                risk=parse_numeric(row['risk'], 'risk', self.strict),
                weight=parse_numeric(weight, 'weight', self.strict),
            ))

        return AssetRegistry(assets, strict=self.strict)

    def validate_assets(self, registry: AssetRegistry) -> Dict[str, Any]:
        """
        Validate a loaded registry and return diagnostics.

        Checks:
        - At least one asset
        - Risks are non-negative
        - Weights are non-negative and sum to 1

        Returns:
            Dictionary with validation results
        """
        results = {
            'is_valid': True,
            'warnings': [],
            'errors': [],
            'n_assets': len(registry),
            'asset_names': registry.names
        }

        if len(registry) == 0:
            results['errors'].append("No assets loaded")
            results['is_valid'] = False
            return results

        for asset in registry:
            if asset.risk < 0:
                results['warnings'].append(f"Asset '{asset.name}' has negative risk {asset.risk}")
            if asset.weight < 0:
                results['warnings'].append(f"Asset '{asset.name}' has negative weight {asset.weight}")
            if not asset.name:
                results['warnings'].append("Asset with empty name")

        total = float(np.sum(registry.weights))
        if not np.isclose(total, 1.0):
            results['warnings'].append(f"Weights sum to {total:.6f}, not 1")

        return results


def load_assets(file_path: Union[str, Path], sheet_name: Optional[str] = None,
                strict: bool = False) -> AssetRegistry:
    """
    Convenience function to load an asset table.

    Args:
        file_path: Path to CSV or Excel file
        sheet_name: Optional Excel sheet name
        strict: Reject malformed numeric cells

    Returns:
        AssetRegistry
    """
    loader = AssetLoader(strict=strict)
    registry = loader.load_file(file_path, sheet_name)
    for warning in loader.validate_assets(registry)['warnings']:
        warnings.warn(warning)
    return registry


def population_to_frame(
    population: Sequence[PortfolioCandidate],
    asset_names: Optional[List[str]] = None
) -> pd.DataFrame:
    """
    Tabulate a scored population: one row per candidate with return, risk,
    Sharpe ratio and one weight column per asset.
    """
    if asset_names is None:
        n_assets = len(population[0].weights) if population else 0
        asset_names = [f"Asset_{i+1}" for i in range(n_assets)]

    rows = []
    for candidate in population:
        row = {
            'expected_return': candidate.expected_return,
            'risk': candidate.risk,
            'sharpe_ratio': candidate.sharpe_ratio,
        }
        for name, w in zip(asset_names, candidate.weights):
            row[f"w_{name}"] = w
        rows.append(row)

    columns = ['expected_return', 'risk', 'sharpe_ratio'] + [f"w_{n}" for n in asset_names]
    return pd.DataFrame(rows, columns=columns)


def save_population_csv(
    population: Sequence[PortfolioCandidate],
    file_path: Union[str, Path],
    asset_names: Optional[List[str]] = None
) -> Path:
    """Write a scored population to CSV and return the path."""
    path = Path(file_path)
    population_to_frame(population, asset_names).to_csv(path, index=False)
    return path
