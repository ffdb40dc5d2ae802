"""
Ledger Errors — Stable-Coded Failure Kinds and Tagged Results

Every fallible ledger operation returns a LedgerResult:
  - ok=True  → value carries the success payload
  - ok=False → error carries exactly one LedgerError

Error codes are STABLE. Never renumber an existing kind.
Exceptions are not used for control flow at the ledger boundary;
LedgerResult.unwrap() exists for callers that prefer them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


# =========================================================================
# ERROR KINDS
# =========================================================================

class LedgerError(Enum):
    """CLOSED ENUM - value is the stable numeric code."""
    INVALID_IDENTITY = 1000
    DUPLICATE_REGISTRATION = 1001
    INVALID_JURISDICTION = 1002
    NOT_ADMIN = 1003
    REGISTRATION_NOT_FOUND = 1004
    INVALID_HASH = 1005
    INVALID_TITLE = 1006
    INVALID_DESCRIPTION = 1007
    INVALID_STATUS = 1008
    INVALID_ELIGIBILITY_SCORE = 1009  # reserved
    INVALID_USER_PRINCIPAL = 1010
    INVALID_TIMESTAMP = 1011          # reserved
    INVALID_USER_ID = 1012
    AUTHORITY_NOT_CONFIGURED = 1013
    AUTHORITY_ALREADY_SET = 1014
    INVALID_FEE = 1015
    CAPACITY_EXCEEDED = 1016
    INVALID_MAX_REGISTRATIONS = 1017
    TRANSFER_FAILED = 1018
    NOT_AUTHORITY = 1019

    @property
    def code(self) -> int:
        return self.value

    @property
    def kind(self) -> str:
        """CamelCase name, e.g. DUPLICATE_REGISTRATION → DuplicateRegistration."""
        return "".join(part.capitalize() for part in self.name.split("_"))


class LedgerOperationError(Exception):
    """Raised by LedgerResult.unwrap() on a failed result."""

    def __init__(self, error: LedgerError):
        self.error = error
        super().__init__(f"[LEDGER ERROR] {error.kind} ({error.code})")


# =========================================================================
# TAGGED RESULT
# =========================================================================

@dataclass(frozen=True)
class LedgerResult:
    """Success value or a single LedgerError. Never both."""
    ok: bool
    value: Any = None
    error: Optional[LedgerError] = None

    @classmethod
    def success(cls, value: Any = True) -> "LedgerResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: LedgerError) -> "LedgerResult":
        return cls(ok=False, error=error)

    def unwrap(self) -> Any:
        if not self.ok:
            raise LedgerOperationError(self.error)
        return self.value
