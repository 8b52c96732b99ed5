from __future__ import annotations

import sys
from pathlib import Path

import pytest

_START = Path(__file__).resolve().parent
_repo_root = _START
while _repo_root != _repo_root.parent and not (_repo_root / "surface_explorer" / "__init__.py").exists():
    _repo_root = _repo_root.parent

sys.path.insert(0, str(_repo_root))

from surface_explorer.surface_grid import generate_option_surface  # noqa: E402


@pytest.fixture
def grid():
    """9 strikes (columns) x 6 expiries (rows), coordinates 0..N-1."""
    return generate_option_surface()
