"""
TEST IN-MEMORY COLLABORATORS — Identity, Jurisdictions, Fees, Admins, Clock
"""

from voter_ledger.collaborators.interfaces import JurisdictionRules
from voter_ledger.collaborators.memory import (
    BlockClock,
    InMemoryAdminSet,
    InMemoryIdentityGate,
    InMemoryJurisdictionRegistry,
    RecordingFeeTransfer,
    TransferRecord,
)


class TestIdentityGate:

    def test_bind_and_resolve(self):
        gate = InMemoryIdentityGate()
        gate.bind("ST1", "hash1")
        assert gate.resolve_identity("ST1") == "hash1"

    def test_unbound_is_none(self):
        gate = InMemoryIdentityGate({"ST1": "hash1"})
        gate.unbind("ST1")
        assert gate.resolve_identity("ST1") is None


class TestJurisdictionRegistry:

    def test_rules_imply_validity(self):
        registry = InMemoryJurisdictionRegistry(
            rules={"USA": JurisdictionRules(min_age=18, min_residency=1)})
        assert registry.is_valid_jurisdiction("USA") is True
        assert registry.rules_for("USA").min_age == 18

    def test_valid_without_rules(self):
        registry = InMemoryJurisdictionRegistry(["EU"])
        assert registry.is_valid_jurisdiction("EU") is True
        assert registry.rules_for("EU") is None

    def test_remove(self):
        registry = InMemoryJurisdictionRegistry(["EU"])
        registry.remove_jurisdiction("EU")
        assert registry.is_valid_jurisdiction("EU") is False


class TestFeeTransfer:

    def test_records_successful_transfer(self):
        fees = RecordingFeeTransfer()
        assert fees.transfer(100, "A", "B") is True
        assert fees.transfers == [TransferRecord(100, "A", "B")]

    def test_failure_records_nothing(self):
        fees = RecordingFeeTransfer()
        fees.fail_transfers = True
        assert fees.transfer(100, "A", "B") is False
        assert fees.transfers == []


class TestAdminSetAndClock:

    def test_admin_membership(self):
        admins = InMemoryAdminSet(["ST1"])
        assert admins.is_admin("ST1") is True
        admins.remove("ST1")
        assert admins.is_admin("ST1") is False

    def test_clock_advances(self):
        clock = BlockClock()
        assert clock.block_height == 0
        assert clock.advance(3) == 3
        assert clock.block_height == 3
