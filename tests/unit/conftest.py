"""
Unit test fixtures. Pure functions and the in-memory store; no HTTP.
"""
import pytest

from cybersafe.services.progress_store import InMemoryProgressStore


@pytest.fixture
def memory_store():
    return InMemoryProgressStore()
