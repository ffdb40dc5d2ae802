"""
In-Memory Collaborators — Standalone Backends for the Ledger

Default backends used by the server and by tests:
    InMemoryIdentityGate         principal → identity hash table
    InMemoryJurisdictionRegistry jurisdiction → optional rules
    InMemoryEligibilityScoring   (jurisdiction, hash) → score
    RecordingFeeTransfer         records successful transfers, can be forced to fail
    InMemoryAdminSet             admin principals
    BlockClock                   manually advanced block height

State is lost on restart.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from voter_ledger.collaborators.interfaces import (
    AdminAuthorization,
    EligibilityScoring,
    FeeTransfer,
    IdentityGate,
    JurisdictionRegistry,
    JurisdictionRules,
    LogicalClock,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------

class InMemoryIdentityGate(IdentityGate):

    def __init__(self, bindings: Optional[Dict[str, str]] = None) -> None:
        self._bindings: Dict[str, str] = dict(bindings or {})

    def bind(self, principal: str, identity_hash: str) -> None:
        self._bindings[principal] = identity_hash

    def unbind(self, principal: str) -> None:
        self._bindings.pop(principal, None)

    def resolve_identity(self, principal: str) -> Optional[str]:
        return self._bindings.get(principal)


# ---------------------------------------------------------------------------
# Jurisdictions
# ---------------------------------------------------------------------------

class InMemoryJurisdictionRegistry(JurisdictionRegistry):
    """A jurisdiction may be valid without publishing rules."""

    def __init__(self, jurisdictions: Iterable[str] = (),
                 rules: Optional[Dict[str, JurisdictionRules]] = None) -> None:
        self._jurisdictions = set(jurisdictions)
        self._rules: Dict[str, JurisdictionRules] = dict(rules or {})
        self._jurisdictions.update(self._rules)

    def remove_jurisdiction(self, jurisdiction_id: str) -> None:
        self._jurisdictions.discard(jurisdiction_id)
        self._rules.pop(jurisdiction_id, None)

    def is_valid_jurisdiction(self, jurisdiction_id: str) -> bool:
        return jurisdiction_id in self._jurisdictions

    def rules_for(self, jurisdiction_id: str) -> Optional[JurisdictionRules]:
        return self._rules.get(jurisdiction_id)


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

class InMemoryEligibilityScoring(EligibilityScoring):

    def __init__(self) -> None:
        self._scores: Dict[Tuple[str, str], int] = {}

    def set_score(self, jurisdiction_id: str, registration_hash: str, score: int) -> None:
        self._scores[(jurisdiction_id, registration_hash)] = score

    def score_for(self, jurisdiction_id: str, registration_hash: str) -> Optional[int]:
        return self._scores.get((jurisdiction_id, registration_hash))


# ---------------------------------------------------------------------------
# Fees
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TransferRecord:
    amount: int
    sender: str
    recipient: str


class RecordingFeeTransfer(FeeTransfer):
    """Keeps every successful transfer. Set fail_transfers to simulate a
    rejected payment."""

    def __init__(self) -> None:
        self.transfers: List[TransferRecord] = []
        self.fail_transfers = False

    def transfer(self, amount: int, sender: str, recipient: str) -> bool:
        if self.fail_transfers:
            logger.warning("[FEE] Transfer of %d from %s to %s rejected",
                           amount, sender, recipient)
            return False
        self.transfers.append(TransferRecord(amount, sender, recipient))
        logger.info("[FEE] Transferred %d from %s to %s", amount, sender, recipient)
        return True


# ---------------------------------------------------------------------------
# Admin set
# ---------------------------------------------------------------------------

class InMemoryAdminSet(AdminAuthorization):

    def __init__(self, admins: Iterable[str] = ()) -> None:
        self._admins = set(admins)

    def add(self, principal: str) -> None:
        self._admins.add(principal)

    def remove(self, principal: str) -> None:
        self._admins.discard(principal)

    def clear(self) -> None:
        self._admins.clear()

    def is_admin(self, principal: str) -> bool:
        return principal in self._admins


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------

class BlockClock(LogicalClock):

    def __init__(self, height: int = 0) -> None:
        self._height = height

    @property
    def block_height(self) -> int:
        return self._height

    def advance(self, blocks: int = 1) -> int:
        self._height += blocks
        return self._height
