"""
CLI entry point for portfolio analysis.

Usage:
    python run_cli.py                         # Run with the default assets
    python run_cli.py --file assets.csv       # Run with a custom asset table
    python run_cli.py --risk-aversion 5       # Set risk aversion (1-10)
    python run_cli.py --strict                # Reject malformed numbers

For installed package, use: opto-analyze
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from opto.cli.main import main

if __name__ == "__main__":
    sys.exit(main())
