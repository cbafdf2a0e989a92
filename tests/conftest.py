import sys
from pathlib import Path

import pytest

# Ensure local package is imported before any installed version
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from qcanvas.qcanvas import Session  # noqa: E402


@pytest.fixture(autouse=True)
def restore_config():
    """Every test starts from, and leaves behind, the same Config values."""
    with Session():
        yield
