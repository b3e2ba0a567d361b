#!/usr/bin/env python3
"""Run the trending index trader."""

import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from trend_trader.cli import main

if __name__ == "__main__":
    sys.exit(main())
