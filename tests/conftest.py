import sys
from datetime import date
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def today() -> date:
    """Anchor date for parser tests: Saturday, 2024-06-15."""
    return date(2024, 6, 15)
