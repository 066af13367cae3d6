from __future__ import annotations

import threading

TXID_MODULUS = 1 << 16


class TransactionIdAllocator:
    """
    Shared 16-bit transaction ID counter.

    Every call hands out the current value and advances the counter by one,
    wrapping at 2**16. IDs repeat after 65536 allocations; nothing checks them
    against requests that are still outstanding.
    """

    def __init__(self, start: int = 0) -> None:
        self._value = start % TXID_MODULUS
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            txid = self._value
            self._value = (txid + 1) % TXID_MODULUS
        return txid


__all__ = ["TXID_MODULUS", "TransactionIdAllocator"]
