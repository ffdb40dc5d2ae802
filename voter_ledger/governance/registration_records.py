"""
Registration Records — Ledger Data Model

Registration        one record per (user_id, jurisdiction_id)
RegistrationUpdate  last edit only, overwritten on every edit
LedgerConfig        counters, capacity, fee, authority principal

All records are frozen. Mutation means replacing the record.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


# =========================================================================
# LIMITS
# =========================================================================

USER_ID_MAX_LENGTH = 40
HASH_MAX_LENGTH = 64
TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500

DEFAULT_ELIGIBILITY_SCORE = 100


class RegistrationStatus(Enum):
    """CLOSED ENUM - no transition graph, any label may follow any other."""
    ACTIVE = "active"
    PENDING = "pending"
    ARCHIVED = "archived"

    @classmethod
    def parse(cls, label: str) -> Optional["RegistrationStatus"]:
        """Return the status for a label, or None when the label is unknown."""
        try:
            return cls(label)
        except ValueError:
            return None


# =========================================================================
# RECORDS
# =========================================================================

@dataclass(frozen=True)
class RegistrationKey:
    user_id: str
    jurisdiction_id: str

    def __str__(self) -> str:
        return f"{self.user_id}-{self.jurisdiction_id}"


@dataclass(frozen=True)
class Registration:
    """A voter registration.

    registration_hash and eligibility_score are fixed at creation.
    timestamp is the block height of the last mutation.
    """
    registration_hash: str
    title: str
    description: str
    timestamp: int
    status: RegistrationStatus
    eligibility_score: int

    def to_dict(self) -> dict:
        return {
            "registration_hash": self.registration_hash,
            "title": self.title,
            "description": self.description,
            "timestamp": self.timestamp,
            "status": self.status.value,
            "eligibility_score": self.eligibility_score,
        }


@dataclass(frozen=True)
class RegistrationUpdate:
    update_title: str
    update_description: str
    update_timestamp: int
    updater: str

    def to_dict(self) -> dict:
        return {
            "update_title": self.update_title,
            "update_description": self.update_description,
            "update_timestamp": self.update_timestamp,
            "updater": self.updater,
        }


@dataclass(frozen=True)
class LedgerConfig:
    """Process-wide ledger configuration, replaced only by gated setters."""
    max_registrations: int
    registration_fee: int
    next_registration_id: int = 0
    authority_contract: Optional[str] = None

    @property
    def authority_configured(self) -> bool:
        return self.authority_contract is not None

    def to_dict(self) -> dict:
        return {
            "next_registration_id": self.next_registration_id,
            "max_registrations": self.max_registrations,
            "registration_fee": self.registration_fee,
            "authority_contract": self.authority_contract,
        }
