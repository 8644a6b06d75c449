"""Pytest configuration shared by all gridrunner tests."""

import os
import sys
from collections.abc import Generator
from pathlib import Path

import pytest

tests_root = Path(__file__).parent.parent
if str(tests_root) not in sys.path:
    sys.path.insert(0, str(tests_root))


@pytest.fixture(autouse=True)
def clean_gridrunner_env() -> Generator[None, None, None]:
    """Ensure GRIDRUNNER_* variables from the host do not leak into tests.

    Yields
    ------
    None
        Control back to test after clearing the environment
    """
    saved = {
        key: os.environ.pop(key)
        for key in list(os.environ)
        if key.startswith("GRIDRUNNER_")
    }

    yield

    for key in [k for k in os.environ if k.startswith("GRIDRUNNER_")]:
        del os.environ[key]
    os.environ.update(saved)
