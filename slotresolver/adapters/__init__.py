"""
Adapters layer - Concrete stores backing the service protocols.
"""

from .memory_store import SAMPLE_DATA_FILE, InMemoryStore

__all__ = ["InMemoryStore", "SAMPLE_DATA_FILE"]
