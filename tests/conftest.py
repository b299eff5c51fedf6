"""Pytest configuration and test helpers."""

from __future__ import annotations

import sys
from pathlib import Path


# Make ``kinonotes`` importable when the tests run without an editable install.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
