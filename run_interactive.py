"""
Interactive portfolio session.

Usage:
    python run_interactive.py

For installed package, use: opto-interactive
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from opto.cli.interactive import main

if __name__ == "__main__":
    sys.exit(main())
