"""
Package entry point.

This allows the sync CLI to be run as:
python -m catalog_sync
"""

import sys

from catalog_sync.main import main

if __name__ == "__main__":
    sys.exit(main())
