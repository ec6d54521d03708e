"""Shared test doubles: re-export the memory store."""

from __future__ import annotations

from kvgate.persistence.memory_backend import MemoryKeyValueStore

__all__ = ["MemoryKeyValueStore"]
