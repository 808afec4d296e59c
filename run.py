#!/usr/bin/env python
"""
Launcher script for the Bar Archive command line.

This script ensures the src/ directory is on the Python path before
running the CLI, so it works from a checkout without installation.
"""

import sys
from pathlib import Path

# Add src/ to the Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / "src"))

# Now import and run the CLI
from bar_archive.utils.export_cli import main

if __name__ == "__main__":
    sys.exit(main())
