from .base import CounterStore
from .memory import MemoryStore

__all__ = ["CounterStore", "MemoryStore"]
