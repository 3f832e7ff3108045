"""Main entry point for running symcalc_pkg as a module.

This allows running symcalc with:
    python -m symcalc_pkg
    python -m symcalc_pkg -e "2 * (3 + 4)"
    python -m symcalc_pkg -s x=2 -e "x + 1"
"""

from __future__ import annotations

import sys

from .cli import main_entry

if __name__ == "__main__":
    sys.exit(main_entry())
