"""
Main entry point for running the package as a module.

Usage:
    python -m derivgen generate thumbnail --bundle article
    python -m derivgen show-usage thumbnail
"""

import sys
from .cli import main

if __name__ == '__main__':
    sys.exit(main())
