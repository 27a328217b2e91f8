import sys
from pathlib import Path

import pytest

# Make 'src' importable without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from craftmaster.data import load_enemies, load_items, load_recipes  # noqa: E402


@pytest.fixture(scope="session")
def items():
    return load_items()


@pytest.fixture(scope="session")
def recipes():
    return load_recipes()


@pytest.fixture(scope="session")
def enemies():
    return load_enemies()
