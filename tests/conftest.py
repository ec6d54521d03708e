"""Shared fixtures: in-memory store and a dispatcher wired to it."""

from __future__ import annotations

import pytest

from kvgate.gateway.dispatcher import Dispatcher
from tests.fakes import MemoryKeyValueStore


@pytest.fixture
def store():
    return MemoryKeyValueStore()


@pytest.fixture
def dispatcher(store):
    return Dispatcher(store)
