"""Run the texbridge CLI with ``python -m texbridge``."""

import sys

from texbridge.cli import main

if __name__ == "__main__":
    sys.exit(main())
