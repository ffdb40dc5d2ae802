"""
Voter Ledger API Server

FastAPI application hosting the registration ledger router.
Standalone mode wires the ledger to in-memory collaborators seeded
from LedgerSettings (jurisdictions, admins, identity bindings).
"""

import logging
from typing import Optional

from fastapi import FastAPI

from voter_ledger.api.ledger_routes import get_ledger, ledger_router
from voter_ledger.collaborators.memory import (
    BlockClock,
    InMemoryAdminSet,
    InMemoryEligibilityScoring,
    InMemoryIdentityGate,
    InMemoryJurisdictionRegistry,
    RecordingFeeTransfer,
)
from voter_ledger.config.ledger_settings import (
    LedgerSettings,
    configure_logging,
    load_settings,
    validate_settings,
)
from voter_ledger.governance.registration_ledger import RegistrationLedger

logger = logging.getLogger("voter_ledger.server")


def build_in_memory_ledger(settings: Optional[LedgerSettings] = None) -> RegistrationLedger:
    settings = settings or load_settings()
    return RegistrationLedger(
        identity_gate=InMemoryIdentityGate(settings.identities),
        jurisdictions=InMemoryJurisdictionRegistry(settings.jurisdictions),
        scoring=InMemoryEligibilityScoring(),
        fees=RecordingFeeTransfer(),
        admins=InMemoryAdminSet(settings.admins),
        clock=BlockClock(),
        settings=settings,
    )


def create_app(ledger: Optional[RegistrationLedger] = None) -> FastAPI:
    """Build the app. A given ledger replaces the process-wide default."""
    app = FastAPI(title="Voter Registration Ledger")
    app.include_router(ledger_router)
    if ledger is not None:
        app.dependency_overrides[get_ledger] = lambda: ledger

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def main() -> None:
    settings = load_settings()
    configure_logging(settings)
    for ok, message in validate_settings():
        if ok:
            logger.info("[CONFIG] %s", message)
        else:
            logger.warning("[CONFIG] %s", message)

    import uvicorn
    uvicorn.run(create_app(build_in_memory_ledger(settings)),
                host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
