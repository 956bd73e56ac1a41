"""Tests for PolicyEnforcer and response flag derivation."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from grounding_labels.errors import ErrorKind, LabelError
from grounding_labels.labels.defaults import default_labels
from grounding_labels.labels.models import Label, ProtectionSettings
from grounding_labels.labels.priority import PriorityTier
from grounding_labels.protection.policy import PolicyEnforcer, ResponseFlags, requires_encryption


@pytest.fixture()
def enforcer() -> PolicyEnforcer:
    return PolicyEnforcer()


@pytest.fixture()
def labels() -> dict[str, Label]:
    return {label.id: label for label in default_labels()}


# ---------------------------------------------------------------------------
# Flags
# ---------------------------------------------------------------------------


class TestDeriveFlags:
    def test_public_unrestricted(self, enforcer: PolicyEnforcer, labels: dict[str, Label]) -> None:
        flags = enforcer.derive_flags(labels["public"])
        assert flags == ResponseFlags(True, True, True, False)

    def test_confidential(self, enforcer: PolicyEnforcer, labels: dict[str, Label]) -> None:
        flags = enforcer.derive_flags(labels["confidential"])
        assert flags.should_display
        assert not flags.allow_copy_paste
        assert flags.allow_grounding
        assert flags.requires_encryption

    def test_highly_confidential_hidden(self, enforcer: PolicyEnforcer, labels: dict[str, Label]) -> None:
        assert not enforcer.derive_flags(labels["highly-confidential"]).should_display

    def test_restricted_blocks_everything(self, enforcer: PolicyEnforcer, labels: dict[str, Label]) -> None:
        flags = enforcer.derive_flags(labels["restricted"])
        assert flags == ResponseFlags(False, False, False, True)

    def test_missing_protection_is_unrestricted(self, enforcer: PolicyEnforcer) -> None:
        flags = enforcer.derive_flags(Label(id="x", name="X", protection=None))
        assert flags == ResponseFlags(True, True, True, False)

    def test_to_dict(self) -> None:
        assert ResponseFlags(True, False, True, False).to_dict() == {
            "should_display": True,
            "allow_copy_paste": False,
            "allow_grounding": True,
            "requires_encryption": False,
        }


class TestRequiresEncryption:
    @pytest.mark.parametrize(
        "tier, expected",
        [
            (PriorityTier.PUBLIC, False),
            (PriorityTier.INTERNAL, False),
            (PriorityTier.CONFIDENTIAL, True),
            (PriorityTier.HIGHLY_CONFIDENTIAL, True),
            (PriorityTier.RESTRICTED, True),
        ],
    )
    def test_flag_only_honoured_from_confidential(self, tier: PriorityTier, expected: bool) -> None:
        label = Label(id="x", name="X", priority=tier, protection=ProtectionSettings(require_encryption=True))
        assert requires_encryption(label) is expected

    def test_flag_unset(self) -> None:
        label = Label(id="x", name="X", priority=PriorityTier.RESTRICTED)
        assert not requires_encryption(label)


# ---------------------------------------------------------------------------
# Access checks
# ---------------------------------------------------------------------------


class TestAccess:
    def test_open_label(self, enforcer: PolicyEnforcer, labels: dict[str, Label]) -> None:
        enforcer.check_access(labels["restricted"], "anyone")
        assert enforcer.has_access(labels["restricted"], "anyone")

    def test_user_not_allowed(self, enforcer: PolicyEnforcer) -> None:
        label = Label(id="hr", name="HR", protection=ProtectionSettings(allowed_users=["alice"]))
        with pytest.raises(LabelError) as exc_info:
            enforcer.check_access(label, "bob")
        err = exc_info.value
        assert err.kind is ErrorKind.UNAUTHORIZED_ACCESS
        assert err.user == "bob"
        assert err.label_id == "hr"

    def test_group_allowed(self, enforcer: PolicyEnforcer) -> None:
        label = Label(id="hr", name="HR", protection=ProtectionSettings(allowed_groups=["hr-team"]))
        assert enforcer.has_access(label, "bob", ["hr-team"])
        assert not enforcer.has_access(label, "bob", ["sales"])

    def test_expired_protection(self, enforcer: PolicyEnforcer) -> None:
        expiry = datetime(2026, 1, 1, tzinfo=timezone.utc)
        label = Label(id="tmp", name="Tmp", protection=ProtectionSettings(expiration_time=expiry))
        assert enforcer.has_access(label, "bob", now=expiry - timedelta(hours=1))
        with pytest.raises(LabelError) as exc_info:
            enforcer.check_access(label, "bob", now=expiry + timedelta(hours=1))
        assert "expired" in exc_info.value.message
