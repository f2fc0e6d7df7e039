# tests/conftest.py

import logging
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture
def logger():
    test_logger = logging.getLogger("source_query.tests")
    test_logger.setLevel(logging.DEBUG)
    return test_logger
