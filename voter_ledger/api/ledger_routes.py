"""
Ledger API Routes — FastAPI router for the registration ledger.

Endpoints:
  - POST /api/ledger/authority                            bootstrap authority principal
  - POST /api/ledger/max-registrations                    change capacity (authority only)
  - POST /api/ledger/fee                                  change fee (authority only)
  - POST /api/ledger/registrations                        register a voter
  - GET  /api/ledger/registrations/{user}/{jur}           read a registration
  - PUT  /api/ledger/registrations/{user}/{jur}           edit title/description (admin)
  - PUT  /api/ledger/registrations/{user}/{jur}/status    change status (admin)
  - GET  /api/ledger/registrations/{user}/{jur}/update    last edit
  - GET  /api/ledger/count                                total registrations
  - GET  /api/ledger/jurisdictions/{jur}/count            per-jurisdiction count
  - GET  /api/ledger/config                               configuration snapshot

Mutating routes require the X-Caller-Principal header.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from pydantic import BaseModel

from voter_ledger.governance.ledger_errors import LedgerError, LedgerResult
from voter_ledger.governance.registration_ledger import RegistrationLedger

logger = logging.getLogger(__name__)

ledger_router = APIRouter(prefix="/api/ledger", tags=["ledger"])


# =============================================================================
# REQUEST MODELS
# =============================================================================

class AuthorityRequest(BaseModel):
    principal: str


class MaxRegistrationsRequest(BaseModel):
    max_registrations: int


class FeeRequest(BaseModel):
    registration_fee: int


class RegisterVoterRequest(BaseModel):
    user_principal: str
    user_id: str
    jurisdiction_id: str
    registration_hash: str
    title: str
    description: str = ""


class UpdateRegistrationRequest(BaseModel):
    title: str
    description: str = ""


class UpdateStatusRequest(BaseModel):
    status: str


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_ledger() -> RegistrationLedger:
    """Process-wide ledger. Tests replace it via app.dependency_overrides."""
    if not hasattr(get_ledger, "_instance"):
        from voter_ledger.api.server import build_in_memory_ledger
        get_ledger._instance = build_in_memory_ledger()
    return get_ledger._instance


def require_caller(
    x_caller_principal: Optional[str] = Header(default=None),
) -> str:
    if not x_caller_principal:
        raise HTTPException(
            status_code=401,
            detail={"error": "CALLER_REQUIRED", "detail": "X-Caller-Principal header required"},
        )
    return x_caller_principal


# =============================================================================
# ERROR MAPPING
# =============================================================================

_HTTP_STATUS = {
    LedgerError.REGISTRATION_NOT_FOUND: 404,
    LedgerError.NOT_ADMIN: 403,
    LedgerError.NOT_AUTHORITY: 403,
    LedgerError.INVALID_IDENTITY: 403,
    LedgerError.DUPLICATE_REGISTRATION: 409,
    LedgerError.CAPACITY_EXCEEDED: 409,
    LedgerError.AUTHORITY_ALREADY_SET: 409,
    LedgerError.AUTHORITY_NOT_CONFIGURED: 409,
    LedgerError.TRANSFER_FAILED: 402,
}


def _unwrap(result: LedgerResult):
    if result.ok:
        return result.value
    error = result.error
    raise HTTPException(
        status_code=_HTTP_STATUS.get(error, 422),
        detail={"error": error.kind, "code": error.code},
    )


def _not_found() -> HTTPException:
    error = LedgerError.REGISTRATION_NOT_FOUND
    return HTTPException(status_code=404, detail={"error": error.kind, "code": error.code})


# =============================================================================
# CONFIGURATION ROUTES
# =============================================================================

@ledger_router.post("/authority")
def set_authority(req: AuthorityRequest, caller: str = Depends(require_caller),
                  ledger: RegistrationLedger = Depends(get_ledger)):
    _unwrap(ledger.set_authority_contract(caller, req.principal))
    return {"ok": True, "authority_contract": req.principal}


@ledger_router.post("/max-registrations")
def set_max_registrations(req: MaxRegistrationsRequest,
                          caller: str = Depends(require_caller),
                          ledger: RegistrationLedger = Depends(get_ledger)):
    _unwrap(ledger.set_max_registrations(caller, req.max_registrations))
    return {"ok": True, "max_registrations": req.max_registrations}


@ledger_router.post("/fee")
def set_registration_fee(req: FeeRequest, caller: str = Depends(require_caller),
                         ledger: RegistrationLedger = Depends(get_ledger)):
    _unwrap(ledger.set_registration_fee(caller, req.registration_fee))
    return {"ok": True, "registration_fee": req.registration_fee}


@ledger_router.get("/config")
def get_config(ledger: RegistrationLedger = Depends(get_ledger)):
    return ledger.get_config().to_dict()


# =============================================================================
# REGISTRATION ROUTES
# =============================================================================

@ledger_router.post("/registrations", status_code=201)
def register_voter(req: RegisterVoterRequest, caller: str = Depends(require_caller),
                   ledger: RegistrationLedger = Depends(get_ledger)):
    registration = _unwrap(ledger.register_voter(
        caller,
        req.user_principal,
        req.user_id,
        req.jurisdiction_id,
        req.registration_hash,
        req.title,
        req.description,
    ))
    logger.info("[API] Registration created for %s/%s", req.user_id, req.jurisdiction_id)
    return registration.to_dict()


@ledger_router.get("/registrations/{user_id}/{jurisdiction_id}")
def get_registration(user_id: str, jurisdiction_id: str,
                     ledger: RegistrationLedger = Depends(get_ledger)):
    registration = ledger.get_registration(user_id, jurisdiction_id)
    if registration is None:
        raise _not_found()
    return registration.to_dict()


@ledger_router.put("/registrations/{user_id}/{jurisdiction_id}")
def update_registration(user_id: str, jurisdiction_id: str,
                        req: UpdateRegistrationRequest,
                        caller: str = Depends(require_caller),
                        ledger: RegistrationLedger = Depends(get_ledger)):
    _unwrap(ledger.update_registration(caller, user_id, jurisdiction_id,
                                       req.title, req.description))
    return ledger.get_registration(user_id, jurisdiction_id).to_dict()


@ledger_router.put("/registrations/{user_id}/{jurisdiction_id}/status")
def update_registration_status(user_id: str, jurisdiction_id: str,
                               req: UpdateStatusRequest,
                               caller: str = Depends(require_caller),
                               ledger: RegistrationLedger = Depends(get_ledger)):
    _unwrap(ledger.update_registration_status(caller, user_id, jurisdiction_id, req.status))
    return ledger.get_registration(user_id, jurisdiction_id).to_dict()


@ledger_router.get("/registrations/{user_id}/{jurisdiction_id}/update")
def get_registration_update(user_id: str, jurisdiction_id: str,
                            ledger: RegistrationLedger = Depends(get_ledger)):
    update = ledger.get_registration_update(user_id, jurisdiction_id)
    if update is None:
        raise _not_found()
    return update.to_dict()


# =============================================================================
# COUNTERS
# =============================================================================

@ledger_router.get("/count")
def get_registration_count(ledger: RegistrationLedger = Depends(get_ledger)):
    return {"count": ledger.get_registration_count()}


@ledger_router.get("/jurisdictions/{jurisdiction_id}/count")
def get_jurisdiction_count(jurisdiction_id: str,
                           ledger: RegistrationLedger = Depends(get_ledger)):
    return {"jurisdiction_id": jurisdiction_id,
            "count": ledger.get_jurisdiction_reg_count(jurisdiction_id)}
