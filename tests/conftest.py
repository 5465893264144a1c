"""Global test configuration.

Seeds RNGs for deterministic parameter initialisation and gives every test
its own current tape, so leaves from one test never land on another's graph.
"""

import os
import random
from pathlib import Path

import numpy as np
import pytest

from scalar_aad import Tape, use_tape


def pytest_sessionstart(session: pytest.Session) -> None:
    """Seed common RNGs to improve test determinism."""
    seed = int(os.environ.get("SCALAR_AAD_TEST_SEED", "12345"))
    random.seed(seed)
    np.random.seed(seed)


@pytest.fixture(autouse=True)
def tape():
    """Fresh current tape for each test."""
    with use_tape(Tape()) as t:
        yield t


def pytest_collection_modifyitems(session, config, items):
    """Auto-mark tests under tests/property with the 'property' marker."""
    for item in items:
        if "property" in Path(str(item.fspath)).parts:
            item.add_marker(pytest.mark.property)
