"""
In-memory record of reminder events already dispatched by this process.
"""

import threading
import uuid
from datetime import date
from typing import Set, Tuple

from ..utils.validation import normalize_key
from .evaluator import DueEvent

LedgerKey = Tuple[uuid.UUID, str, date]


class NotificationLedger:
    """
    Set of ``(pet_id, case-folded vaccine type, due date)`` keys.

    Lost on restart. Only consulted when ``REMINDER_DEDUP_LEDGER`` is enabled.
    """

    def __init__(self) -> None:
        self._keys: Set[LedgerKey] = set()
        self._lock = threading.Lock()

    @staticmethod
    def key_for(event: DueEvent) -> LedgerKey:
        return (event.pet_id, normalize_key(event.vaccine_type), event.next_due_date)

    def __contains__(self, event: DueEvent) -> bool:
        with self._lock:
            return self.key_for(event) in self._keys

    def __len__(self) -> int:
        with self._lock:
            return len(self._keys)

    def claim(self, event: DueEvent) -> bool:
        """Record ``event``; return False if it was already recorded."""
        key = self.key_for(event)
        with self._lock:
            if key in self._keys:
                return False
            self._keys.add(key)
            return True

    def clear(self) -> None:
        with self._lock:
            self._keys.clear()
