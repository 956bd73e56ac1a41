"""Policy enforcer: turns a label's protection settings into response flags.

Flags are pure functions of the label:

- ``should_display``      = not ``prevent_extraction``
- ``allow_copy_paste``    = not ``prevent_copy_paste``
- ``allow_grounding``     = not ``prevent_grounding``
- ``requires_encryption`` = ``require_encryption`` and tier >= CONFIDENTIAL

A label below Confidential never triggers encryption, even when its
``require_encryption`` flag is set.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from grounding_labels.errors import LabelError
from grounding_labels.labels.models import Label
from grounding_labels.labels.priority import PriorityTier

logger = logging.getLogger(__name__)

MINIMUM_ENCRYPTION_TIER = PriorityTier.CONFIDENTIAL


@dataclass(frozen=True)
class ResponseFlags:
    """Actionable flags derived from a label."""

    should_display: bool
    allow_copy_paste: bool
    allow_grounding: bool
    requires_encryption: bool

    def to_dict(self) -> dict[str, bool]:
        return {
            "should_display": self.should_display,
            "allow_copy_paste": self.allow_copy_paste,
            "allow_grounding": self.allow_grounding,
            "requires_encryption": self.requires_encryption,
        }


def requires_encryption(label: Label) -> bool:
    """Return ``True`` when content under ``label`` must be encrypted."""
    return label.settings.require_encryption and label.priority >= MINIMUM_ENCRYPTION_TIER


class PolicyEnforcer:
    """Derives response flags and performs allow-list checks for labels."""

    def derive_flags(self, label: Label) -> ResponseFlags:
        protection = label.settings
        return ResponseFlags(
            should_display=not protection.prevent_extraction,
            allow_copy_paste=not protection.prevent_copy_paste,
            allow_grounding=not protection.prevent_grounding,
            requires_encryption=requires_encryption(label),
        )

    def check_access(
        self,
        label: Label,
        user: str,
        groups: list[str] | None = None,
        now: datetime | None = None,
    ) -> None:
        """Raise unless ``user`` may access content under ``label``.

        Raises
        ------
        LabelError
            ``UNAUTHORIZED_ACCESS`` when the protection has expired or the
            user is on neither allow-list.
        """
        protection = label.settings
        if protection.is_expired(now):
            logger.warning("Access to label '%s' denied for %s: protection expired", label.id, user)
            raise LabelError.unauthorized(label.id, user, "label protection has expired")
        if not protection.permits(user, groups):
            logger.warning("Access to label '%s' denied for %s: not on allow-list", label.id, user)
            raise LabelError.unauthorized(label.id, user, f"user '{user}' is not allowed")

    def has_access(
        self,
        label: Label,
        user: str,
        groups: list[str] | None = None,
        now: datetime | None = None,
    ) -> bool:
        try:
            self.check_access(label, user, groups, now)
        except LabelError:
            return False
        return True
