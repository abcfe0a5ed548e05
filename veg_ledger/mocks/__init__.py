"""Mock implementations for local development and testing."""

from veg_ledger.mocks.in_memory_store import InMemoryRecordStore

__all__ = ["InMemoryRecordStore"]
