""" In-process counter store.

Meant for tests and local experiments. Nothing is persisted and every hash
lives in this object, so give each TimeCounter the instance it should share.
"""

import threading
from typing import Dict, List, Optional

from .base import CounterStore


class MemoryStore(CounterStore):
    def __init__(self):
        self.Hashes: Dict[str, Dict[str, int]] = {}
        self._lock = threading.Lock()

    def Increment(self, hashName: str, field: str, delta: int) -> None:
        with self._lock:
            fields = self.Hashes.setdefault(hashName, {})
            fields[field] = fields.get(field, 0) + delta

    def ReadOne(self, hashName: str, field: str) -> Optional[int]:
        with self._lock:
            return self.Hashes.get(hashName, {}).get(field)

    def ReadMany(self, hashName: str, fields: List[str]) -> List[Optional[int]]:
        with self._lock:
            stored = self.Hashes.get(hashName, {})
            return [stored.get(field) for field in fields]
