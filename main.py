#!/usr/bin/env python3
"""Boostly entry point.

Run with:
    python main.py run
    python -m boostly status
"""

import sys

from boostly.__main__ import main


if __name__ == "__main__":
    sys.exit(main())
