"""
Module execution entry point.

Allows running with: python -m ccmp_cli
"""

import sys
from ccmp_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
