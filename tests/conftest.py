"""
Pytest configuration file for the lazy collections tests.

This file ensures that the parent directory is in the Python path
so that test files can import lazy, sequence, mapping and the other modules.
"""

import sys
from pathlib import Path

# Add the parent directory to the Python path
parent_dir = Path(__file__).parent.parent
if str(parent_dir) not in sys.path:
    sys.path.insert(0, str(parent_dir))

import pytest

import lazy
from models import CollectionSettings
from utils import clear_performance_metrics


@pytest.fixture(autouse=True)
def default_settings():
    """Reset settings and performance metrics around every test"""
    lazy.configure(CollectionSettings())
    clear_performance_metrics()
    yield
    lazy.configure(CollectionSettings())


@pytest.fixture
def one_shot():
    """Factory for one-shot generators that record how many items were produced"""
    produced = []

    def make(items):
        def gen():
            for item in items:
                produced.append(item)
                yield item
        return gen()

    make.produced = produced
    return make
