import random
import sys
from pathlib import Path

import pytest

# Ensure the repo root is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def rng():
    return random.Random(1234)
