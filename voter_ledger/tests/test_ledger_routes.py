"""
Tests for the ledger HTTP surface:
POST /authority → POST /registrations → PUT edit/status → GET queries

Each test builds a fresh app around its own in-memory ledger.
"""

from fastapi.testclient import TestClient

from voter_ledger.api.server import build_in_memory_ledger, create_app
from voter_ledger.config.ledger_settings import LedgerSettings
from voter_ledger.tests.ledger_harness import AUTHORITY, REGISTRANT, USER_ID, LedgerHarness

_REGISTRATION = {
    "user_principal": REGISTRANT,
    "user_id": USER_ID,
    "jurisdiction_id": "USA",
    "registration_hash": "regHash123",
    "title": "Voter Reg",
    "description": "Description",
}


def _as(principal):
    return {"X-Caller-Principal": principal}


class TestLedgerRoutes:

    def setup_method(self):
        self.h = LedgerHarness()
        self.client = TestClient(create_app(self.h.ledger))

    def _bootstrap(self):
        res = self.client.post("/api/ledger/authority", json={"principal": AUTHORITY},
                               headers=_as(REGISTRANT))
        assert res.status_code == 200

    def test_health(self):
        assert self.client.get("/health").json() == {"status": "ok"}

    def test_missing_caller_rejected(self):
        res = self.client.post("/api/ledger/registrations", json=_REGISTRATION)
        assert res.status_code == 401

    def test_register_and_read(self):
        self._bootstrap()
        res = self.client.post("/api/ledger/registrations", json=_REGISTRATION,
                               headers=_as(REGISTRANT))
        assert res.status_code == 201
        assert res.json()["status"] == "active"
        assert res.json()["eligibility_score"] == 100

        res = self.client.get(f"/api/ledger/registrations/{USER_ID}/USA")
        assert res.status_code == 200
        assert res.json()["registration_hash"] == "regHash123"

        assert self.client.get("/api/ledger/count").json() == {"count": 1}
        res = self.client.get("/api/ledger/jurisdictions/USA/count")
        assert res.json() == {"jurisdiction_id": "USA", "count": 1}

    def test_duplicate_is_conflict(self):
        self._bootstrap()
        self.client.post("/api/ledger/registrations", json=_REGISTRATION,
                         headers=_as(REGISTRANT))
        res = self.client.post("/api/ledger/registrations",
                               json={**_REGISTRATION, "registration_hash": "regHash456"},
                               headers=_as(REGISTRANT))
        assert res.status_code == 409
        assert res.json()["detail"] == {"error": "DuplicateRegistration", "code": 1001}

    def test_register_without_authority(self):
        res = self.client.post("/api/ledger/registrations", json=_REGISTRATION,
                               headers=_as(REGISTRANT))
        assert res.status_code == 409
        assert res.json()["detail"]["error"] == "AuthorityNotConfigured"

    def test_invalid_title_is_unprocessable(self):
        self._bootstrap()
        res = self.client.post("/api/ledger/registrations",
                               json={**_REGISTRATION, "title": ""},
                               headers=_as(REGISTRANT))
        assert res.status_code == 422
        assert res.json()["detail"]["error"] == "InvalidTitle"

    def test_failed_transfer_is_payment_required(self):
        self._bootstrap()
        self.h.fees.fail_transfers = True
        res = self.client.post("/api/ledger/registrations", json=_REGISTRATION,
                               headers=_as(REGISTRANT))
        assert res.status_code == 402
        assert self.client.get("/api/ledger/count").json() == {"count": 0}

    def test_missing_registration_404(self):
        res = self.client.get(f"/api/ledger/registrations/{USER_ID}/USA")
        assert res.status_code == 404
        assert res.json()["detail"]["error"] == "RegistrationNotFound"

    def test_edit_and_last_update(self):
        self._bootstrap()
        self.client.post("/api/ledger/registrations", json=_REGISTRATION,
                         headers=_as(REGISTRANT))
        res = self.client.put(f"/api/ledger/registrations/{USER_ID}/USA",
                              json={"title": "New Title", "description": "New Desc"},
                              headers=_as(REGISTRANT))
        assert res.status_code == 200
        assert res.json()["title"] == "New Title"

        res = self.client.get(f"/api/ledger/registrations/{USER_ID}/USA/update")
        assert res.json()["updater"] == REGISTRANT

    def test_edit_by_non_admin_forbidden(self):
        self._bootstrap()
        self.client.post("/api/ledger/registrations", json=_REGISTRATION,
                         headers=_as(REGISTRANT))
        res = self.client.put(f"/api/ledger/registrations/{USER_ID}/USA",
                              json={"title": "Hijack"}, headers=_as("ST7OTHER"))
        assert res.status_code == 403
        assert res.json()["detail"]["error"] == "NotAdmin"
        res = self.client.get(f"/api/ledger/registrations/{USER_ID}/USA")
        assert res.json()["title"] == "Voter Reg"

    def test_status_change(self):
        self._bootstrap()
        self.client.post("/api/ledger/registrations", json=_REGISTRATION,
                         headers=_as(REGISTRANT))
        res = self.client.put(f"/api/ledger/registrations/{USER_ID}/USA/status",
                              json={"status": "archived"}, headers=_as(REGISTRANT))
        assert res.status_code == 200
        assert res.json()["status"] == "archived"

        res = self.client.put(f"/api/ledger/registrations/{USER_ID}/USA/status",
                              json={"status": "deleted"}, headers=_as(REGISTRANT))
        assert res.status_code == 422
        assert res.json()["detail"]["error"] == "InvalidStatus"

    def test_config_setters_authority_only(self):
        self._bootstrap()
        res = self.client.post("/api/ledger/fee", json={"registration_fee": 5},
                               headers=_as(REGISTRANT))
        assert res.status_code == 403
        assert res.json()["detail"]["error"] == "NotAuthority"

        res = self.client.post("/api/ledger/fee", json={"registration_fee": 5},
                               headers=_as(AUTHORITY))
        assert res.status_code == 200
        res = self.client.post("/api/ledger/max-registrations",
                               json={"max_registrations": 3}, headers=_as(AUTHORITY))
        assert res.status_code == 200

        config = self.client.get("/api/ledger/config").json()
        assert config == {
            "next_registration_id": 0,
            "max_registrations": 3,
            "registration_fee": 5,
            "authority_contract": AUTHORITY,
        }

    def test_second_authority_conflict(self):
        self._bootstrap()
        res = self.client.post("/api/ledger/authority", json={"principal": "ST4OTHER"},
                               headers=_as(REGISTRANT))
        assert res.status_code == 409
        assert res.json()["detail"]["error"] == "AuthorityAlreadySet"


class TestStandaloneLedger:

    def test_seeded_from_settings(self):
        settings = LedgerSettings(
            jurisdictions=("USA",),
            admins=(REGISTRANT,),
            identities={REGISTRANT: USER_ID},
        )
        client = TestClient(create_app(build_in_memory_ledger(settings)))
        client.post("/api/ledger/authority", json={"principal": AUTHORITY},
                    headers=_as(REGISTRANT))
        res = client.post("/api/ledger/registrations", json=_REGISTRATION,
                          headers=_as(REGISTRANT))
        assert res.status_code == 201
        res = client.post("/api/ledger/registrations",
                          json={**_REGISTRATION, "jurisdiction_id": "EU"},
                          headers=_as(REGISTRANT))
        assert res.json()["detail"]["error"] == "InvalidJurisdiction"
