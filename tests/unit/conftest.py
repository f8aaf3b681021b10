"""
Pytest configuration and fixtures for smtcompose tests.
"""
import sys
from pathlib import Path

import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


@pytest.fixture
def z3_backend():
    from smtcompose.solver import Z3Backend
    return Z3Backend()
