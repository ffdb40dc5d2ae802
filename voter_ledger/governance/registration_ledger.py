"""
REGISTRATION LEDGER — Permissioned Voter Registration Record Store
=================================================================
Rules:
  - One registration per (user_id, jurisdiction_id), never deleted
  - Creation: capacity → field lengths → identity → jurisdiction
    → duplicate → authority, first failure wins
  - Registration fee transferred to the authority after every other
    fallible step and BEFORE the record is written; a failed transfer
    aborts the registration
  - Edits and status changes are admin-only
  - Eligibility score and registration hash fixed at creation
  - Authority principal set exactly once, never by the caller for itself
  - Capacity and fee changes require caller == authority
  - Every failure leaves all state unchanged
  - All operations serialized under the store lock, across every
    ledger that shares the store
=================================================================
"""

import dataclasses
import logging
from typing import Optional

from voter_ledger.collaborators.interfaces import (
    AdminAuthorization,
    EligibilityScoring,
    FeeTransfer,
    IdentityGate,
    JurisdictionRegistry,
    LogicalClock,
)
from voter_ledger.config.ledger_settings import LedgerSettings, load_settings
from voter_ledger.governance.ledger_errors import LedgerError, LedgerResult
from voter_ledger.governance.registration_records import (
    DEFAULT_ELIGIBILITY_SCORE,
    DESCRIPTION_MAX_LENGTH,
    HASH_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    USER_ID_MAX_LENGTH,
    LedgerConfig,
    Registration,
    RegistrationKey,
    RegistrationStatus,
    RegistrationUpdate,
)
from voter_ledger.storage.registration_store import RegistrationStore

logger = logging.getLogger(__name__)


# ===========================================================
# FIELD VALIDATION (pure, no side effects)
# ===========================================================

def _length_within(value: str, minimum: int, maximum: int) -> bool:
    return minimum <= len(value) <= maximum


def check_edit_fields(title: str, description: str) -> Optional[LedgerError]:
    """Title/description rules shared by creation and edit."""
    if not _length_within(title, 1, TITLE_MAX_LENGTH):
        return LedgerError.INVALID_TITLE
    if not _length_within(description, 0, DESCRIPTION_MAX_LENGTH):
        return LedgerError.INVALID_DESCRIPTION
    return None


def check_registration_fields(user_id: str, registration_hash: str,
                              title: str, description: str) -> Optional[LedgerError]:
    """Length checks in creation order. Returns the first failure or None."""
    if not _length_within(user_id, 1, USER_ID_MAX_LENGTH):
        return LedgerError.INVALID_USER_ID
    if not _length_within(registration_hash, 1, HASH_MAX_LENGTH):
        return LedgerError.INVALID_HASH
    return check_edit_fields(title, description)


# ===========================================================
# LEDGER
# ===========================================================

class RegistrationLedger:
    """Registration state machine over a RegistrationStore."""

    def __init__(self, identity_gate: IdentityGate,
                 jurisdictions: JurisdictionRegistry,
                 scoring: EligibilityScoring,
                 fees: FeeTransfer,
                 admins: AdminAuthorization,
                 clock: LogicalClock,
                 settings: Optional[LedgerSettings] = None,
                 store: Optional[RegistrationStore] = None):
        settings = settings or load_settings()
        self._identity_gate = identity_gate
        self._jurisdictions = jurisdictions
        self._scoring = scoring
        self._fees = fees
        self._admins = admins
        self._clock = clock
        self._store = store or RegistrationStore()
        self._config = LedgerConfig(
            max_registrations=settings.max_registrations,
            registration_fee=settings.registration_fee,
        )
        # Shared with every ledger over the same store.
        self._lock = self._store.lock

    def _reject(self, operation: str, error: LedgerError, **detail) -> LedgerResult:
        logger.warning("[LEDGER] %s rejected: %s (%d) %s",
                       operation, error.kind, error.code, detail or "")
        return LedgerResult.failure(error)

    # ---------------------------------------------------------
    # CONFIGURATION GATING
    # ---------------------------------------------------------
    def set_authority_contract(self, caller: str, principal: str) -> LedgerResult:
        """Bootstrap the authority principal. Succeeds at most once."""
        with self._lock:
            if not principal or principal == caller:
                return self._reject("set_authority_contract",
                                    LedgerError.INVALID_USER_PRINCIPAL, caller=caller)
            if self._config.authority_configured:
                return self._reject("set_authority_contract",
                                    LedgerError.AUTHORITY_ALREADY_SET, caller=caller)
            self._config = dataclasses.replace(self._config, authority_contract=principal)
            logger.info("[LEDGER] Authority contract set to %s by %s", principal, caller)
            return LedgerResult.success(True)

    def _check_authority_caller(self, caller: str) -> Optional[LedgerError]:
        if not self._config.authority_configured:
            return LedgerError.AUTHORITY_NOT_CONFIGURED
        if caller != self._config.authority_contract:
            return LedgerError.NOT_AUTHORITY
        return None

    def set_max_registrations(self, caller: str, new_max: int) -> LedgerResult:
        with self._lock:
            if new_max <= 0:
                return self._reject("set_max_registrations",
                                    LedgerError.INVALID_MAX_REGISTRATIONS, new_max=new_max)
            error = self._check_authority_caller(caller)
            if error:
                return self._reject("set_max_registrations", error, caller=caller)
            self._config = dataclasses.replace(self._config, max_registrations=new_max)
            logger.info("[LEDGER] Max registrations set to %d", new_max)
            return LedgerResult.success(True)

    def set_registration_fee(self, caller: str, new_fee: int) -> LedgerResult:
        with self._lock:
            if new_fee < 0:
                return self._reject("set_registration_fee",
                                    LedgerError.INVALID_FEE, new_fee=new_fee)
            error = self._check_authority_caller(caller)
            if error:
                return self._reject("set_registration_fee", error, caller=caller)
            self._config = dataclasses.replace(self._config, registration_fee=new_fee)
            logger.info("[LEDGER] Registration fee set to %d", new_fee)
            return LedgerResult.success(True)

    # ---------------------------------------------------------
    # CREATE
    # ---------------------------------------------------------
    def register_voter(self, caller: str, user_principal: str, user_id: str,
                       jurisdiction_id: str, registration_hash: str,
                       title: str, description: str) -> LedgerResult:
        """Create a registration. Returns the new Registration on success.

        caller pays the fee; user_principal is checked against the
        identity gate and must resolve to user_id.
        """
        op = "register_voter"
        with self._lock:
            config = self._config

            # 1. Capacity, before any field check
            if config.next_registration_id >= config.max_registrations:
                return self._reject(op, LedgerError.CAPACITY_EXCEEDED,
                                    max_registrations=config.max_registrations)

            # 2-5. Field lengths
            error = check_registration_fields(user_id, registration_hash, title, description)
            if error:
                return self._reject(op, error, user_id=user_id)

            # 6. Identity
            identity_hash = self._identity_gate.resolve_identity(user_principal)
            if identity_hash is None or identity_hash != user_id:
                return self._reject(op, LedgerError.INVALID_IDENTITY,
                                    principal=user_principal)

            # 7. Jurisdiction
            if not self._jurisdictions.is_valid_jurisdiction(jurisdiction_id):
                return self._reject(op, LedgerError.INVALID_JURISDICTION,
                                    jurisdiction=jurisdiction_id)

            # 8. Duplicate
            key = RegistrationKey(user_id, jurisdiction_id)
            if self._store.contains(key):
                return self._reject(op, LedgerError.DUPLICATE_REGISTRATION, key=str(key))

            # 9. Authority
            if not config.authority_configured:
                return self._reject(op, LedgerError.AUTHORITY_NOT_CONFIGURED)

            rules = self._jurisdictions.rules_for(jurisdiction_id)
            logger.debug("[LEDGER] Rules for %s: %s (not enforced)", jurisdiction_id, rules)

            score = self._scoring.score_for(jurisdiction_id, registration_hash)
            if score is None:
                score = DEFAULT_ELIGIBILITY_SCORE

            registration = Registration(
                registration_hash=registration_hash,
                title=title,
                description=description,
                timestamp=self._clock.block_height,
                status=RegistrationStatus.ACTIVE,
                eligibility_score=score,
            )

            # Payment is the last fallible step before the insert.
            if not self._fees.transfer(config.registration_fee, caller,
                                       config.authority_contract):
                return self._reject(op, LedgerError.TRANSFER_FAILED,
                                    amount=config.registration_fee, sender=caller)

            if not self._store.insert(key, registration):
                logger.error("[LEDGER] Store rejected %s after fee of %d from %s",
                             key, config.registration_fee, caller)
                return self._reject(op, LedgerError.DUPLICATE_REGISTRATION, key=str(key))
            self._config = dataclasses.replace(
                config, next_registration_id=config.next_registration_id + 1)

            logger.info("[LEDGER] Registered %s (score=%d, total=%d)",
                        key, score, self._config.next_registration_id)
            return LedgerResult.success(registration)

    # ---------------------------------------------------------
    # EDIT
    # ---------------------------------------------------------
    def update_registration(self, caller: str, user_id: str, jurisdiction_id: str,
                            new_title: str, new_description: str) -> LedgerResult:
        op = "update_registration"
        key = RegistrationKey(user_id, jurisdiction_id)
        with self._lock:
            current = self._store.get(key)
            if current is None:
                return self._reject(op, LedgerError.REGISTRATION_NOT_FOUND, key=str(key))
            if not self._admins.is_admin(caller):
                return self._reject(op, LedgerError.NOT_ADMIN, caller=caller)
            error = check_edit_fields(new_title, new_description)
            if error:
                return self._reject(op, error, key=str(key))

            now = self._clock.block_height
            self._store.replace(key, dataclasses.replace(
                current, title=new_title, description=new_description, timestamp=now))
            self._store.put_update(key, RegistrationUpdate(
                update_title=new_title,
                update_description=new_description,
                update_timestamp=now,
                updater=caller,
            ))
            logger.info("[LEDGER] Registration %s edited by %s", key, caller)
            return LedgerResult.success(True)

    # ---------------------------------------------------------
    # STATUS
    # ---------------------------------------------------------
    def update_registration_status(self, caller: str, user_id: str,
                                   jurisdiction_id: str, new_status: str) -> LedgerResult:
        op = "update_registration_status"
        key = RegistrationKey(user_id, jurisdiction_id)
        with self._lock:
            current = self._store.get(key)
            if current is None:
                return self._reject(op, LedgerError.REGISTRATION_NOT_FOUND, key=str(key))
            if not self._admins.is_admin(caller):
                return self._reject(op, LedgerError.NOT_ADMIN, caller=caller)
            status = RegistrationStatus.parse(new_status)
            if status is None:
                return self._reject(op, LedgerError.INVALID_STATUS, status=new_status)

            self._store.replace(key, dataclasses.replace(
                current, status=status, timestamp=self._clock.block_height))
            logger.info("[LEDGER] Registration %s status %s → %s",
                        key, current.status.value, status.value)
            return LedgerResult.success(True)

    # ---------------------------------------------------------
    # QUERIES
    # ---------------------------------------------------------
    def get_registration(self, user_id: str, jurisdiction_id: str) -> Optional[Registration]:
        with self._lock:
            return self._store.get(RegistrationKey(user_id, jurisdiction_id))

    def get_registration_update(self, user_id: str,
                                jurisdiction_id: str) -> Optional[RegistrationUpdate]:
        with self._lock:
            return self._store.get_update(RegistrationKey(user_id, jurisdiction_id))

    def get_registration_count(self) -> int:
        with self._lock:
            return self._config.next_registration_id

    def get_jurisdiction_reg_count(self, jurisdiction_id: str) -> int:
        with self._lock:
            return self._store.jurisdiction_count(jurisdiction_id)

    def get_config(self) -> LedgerConfig:
        with self._lock:
            return self._config

    @property
    def store(self) -> RegistrationStore:
        return self._store
