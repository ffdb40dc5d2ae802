"""
Registration Store — In-Memory Record Store for the Ledger

Holds:
    registrations         (user_id, jurisdiction_id) → Registration
    registration_updates  (user_id, jurisdiction_id) → RegistrationUpdate
    jurisdiction_counts   jurisdiction_id → registrations ever created

Key uniqueness is enforced HERE by insert(), not by callers.
Records are never deleted. Counters are never decremented.

The store methods do not lock. Every RegistrationLedger built over a
store holds store.lock for the whole of each operation, so ledgers that
share one store are serialized against each other.
"""

import logging
import threading
from typing import Dict, Optional

from voter_ledger.governance.registration_records import (
    Registration,
    RegistrationKey,
    RegistrationUpdate,
)

logger = logging.getLogger(__name__)


class RegistrationStore:
    """Record store with an insert-or-reject primitive."""

    def __init__(self) -> None:
        self._registrations: Dict[RegistrationKey, Registration] = {}
        self._updates: Dict[RegistrationKey, RegistrationUpdate] = {}
        self._jurisdiction_counts: Dict[str, int] = {}
        self.lock = threading.Lock()

    # ---------------------------------------------------------
    # REGISTRATIONS
    # ---------------------------------------------------------
    def contains(self, key: RegistrationKey) -> bool:
        return key in self._registrations

    def get(self, key: RegistrationKey) -> Optional[Registration]:
        return self._registrations.get(key)

    def insert(self, key: RegistrationKey, registration: Registration) -> bool:
        """Insert a new record. Returns False (and changes nothing) if the key exists.

        A successful insert bumps the jurisdiction counter for the key.
        """
        if key in self._registrations:
            logger.debug("[STORE] Insert rejected, key exists: %s", key)
            return False
        self._registrations[key] = registration
        self._jurisdiction_counts[key.jurisdiction_id] = (
            self._jurisdiction_counts.get(key.jurisdiction_id, 0) + 1
        )
        return True

    def replace(self, key: RegistrationKey, registration: Registration) -> bool:
        """Overwrite an existing record. Returns False if the key is unknown."""
        if key not in self._registrations:
            return False
        self._registrations[key] = registration
        return True

    # ---------------------------------------------------------
    # LAST UPDATE (single entry per key, no history)
    # ---------------------------------------------------------
    def put_update(self, key: RegistrationKey, update: RegistrationUpdate) -> None:
        self._updates[key] = update

    def get_update(self, key: RegistrationKey) -> Optional[RegistrationUpdate]:
        return self._updates.get(key)

    # ---------------------------------------------------------
    # COUNTERS
    # ---------------------------------------------------------
    def jurisdiction_count(self, jurisdiction_id: str) -> int:
        return self._jurisdiction_counts.get(jurisdiction_id, 0)

    @property
    def jurisdiction_counts(self) -> Dict[str, int]:
        return dict(self._jurisdiction_counts)

    @property
    def record_count(self) -> int:
        return len(self._registrations)

    @property
    def update_count(self) -> int:
        return len(self._updates)
