#!/usr/bin/env python3
"""
Main script to build a YouTube Shorts production package from top Reddit threads.
Uses the SOLID pipeline in src/shorts_workflow; run from project root.
"""

import sys
from pathlib import Path

# Ensure src is on path when running without installing the package
_SRC = Path(__file__).resolve().parent / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))


if __name__ == "__main__":
    from shorts_workflow.cli import main

    sys.exit(main())
