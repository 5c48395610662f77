"""Storage module - durable slots and the persistence adapter"""
from .manager import FileKeyValueStore, MemoryKeyValueStore
from .persistence import PersistenceAdapter

__all__ = ["FileKeyValueStore", "MemoryKeyValueStore", "PersistenceAdapter"]
