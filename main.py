#!/usr/bin/env python3
"""accesslog — entry point when run from a source checkout."""

import os
import sys

# Ensure the accesslog package is importable when run as `python main.py`
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from accesslog.cli import main

if __name__ == "__main__":
    main()
