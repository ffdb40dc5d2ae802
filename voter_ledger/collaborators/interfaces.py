"""
Collaborator Interfaces — Narrow Boundaries Consumed by the Ledger

The ledger never owns identity, jurisdiction rules, scoring, payment
or the admin set. It calls these interfaces and nothing else.

All calls are synchronous. The ledger holds its lock across them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class JurisdictionRules:
    """Eligibility rules published by a jurisdiction."""
    min_age: int
    min_residency: int


class IdentityGate(ABC):
    """Maps a caller principal to its verified identity hash."""

    @abstractmethod
    def resolve_identity(self, principal: str) -> Optional[str]:
        ...


class JurisdictionRegistry(ABC):

    @abstractmethod
    def is_valid_jurisdiction(self, jurisdiction_id: str) -> bool:
        ...

    @abstractmethod
    def rules_for(self, jurisdiction_id: str) -> Optional[JurisdictionRules]:
        ...


class EligibilityScoring(ABC):

    @abstractmethod
    def score_for(self, jurisdiction_id: str, registration_hash: str) -> Optional[int]:
        """Score for the pair, or None when the scorer has no entry."""
        ...


class FeeTransfer(ABC):

    @abstractmethod
    def transfer(self, amount: int, sender: str, recipient: str) -> bool:
        """Move amount from sender to recipient. Returns False on failure."""
        ...


class AdminAuthorization(ABC):

    @abstractmethod
    def is_admin(self, principal: str) -> bool:
        ...


class LogicalClock(ABC):
    """Source of logical time (block height) for record timestamps."""

    @property
    @abstractmethod
    def block_height(self) -> int:
        ...
