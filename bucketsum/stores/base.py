from typing import List, Optional


class CounterStore:
    """ Hash-of-counters storage the TimeCounter writes buckets into.

    A hash is one metric, a field is one bucket key. Reads return None for a
    field that was never written, which is not the same as a stored 0.
    """

    def Increment(self, hashName: str, field: str, delta: int) -> None:
        """ Create field at delta, or add delta to it. Safe to call concurrently. """
        # Subclass must implement
        raise NotImplementedError

    def ReadOne(self, hashName: str, field: str) -> Optional[int]:
        # Subclass must implement
        raise NotImplementedError

    def ReadMany(self, hashName: str, fields: List[str]) -> List[Optional[int]]:
        """ Values in the same order as fields """
        # Subclass must implement
        raise NotImplementedError
