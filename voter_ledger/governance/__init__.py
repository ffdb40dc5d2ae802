"""
Ledger Governance Package

Ledger data model and error taxonomy.
RegistrationLedger lives in voter_ledger.governance.registration_ledger.
"""

from voter_ledger.governance.ledger_errors import (
    LedgerError,
    LedgerOperationError,
    LedgerResult,
)
from voter_ledger.governance.registration_records import (
    LedgerConfig,
    Registration,
    RegistrationKey,
    RegistrationStatus,
    RegistrationUpdate,
)

__all__ = [
    'LedgerError',
    'LedgerOperationError',
    'LedgerResult',
    'LedgerConfig',
    'Registration',
    'RegistrationKey',
    'RegistrationStatus',
    'RegistrationUpdate',
]
