"""
Entry point for running printer_discovery as a module.

This allows the package to be executed with: python -m printer_discovery
"""

import sys

from .main import main

if __name__ == "__main__":
    sys.exit(main())
