"""
Main entry point for running the package as a module.

Usage:
    python -m photoprep update
    python -m photoprep compress
    python -m photoprep hash --env DEV
"""

import sys
from .cli import main

if __name__ == '__main__':
    sys.exit(main())
