"""
Shared pytest configuration.
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest

from fakes import FakeProvider, FailingProvider


@pytest.fixture
def brand():
    return "acme.com"


@pytest.fixture
def competitors():
    return ["beta.io", "gamma.com", "delta.net"]


@pytest.fixture
def fake_provider():
    return FakeProvider("fake", "FakeGPT", "fake-model-1", reply="1. acme.com leads the market")


@pytest.fixture
def failing_provider():
    return FailingProvider("broken", "BrokenAI", "broken-model")
