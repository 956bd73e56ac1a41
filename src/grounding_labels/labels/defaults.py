"""Built-in label set and the synthesized fallback label."""
from __future__ import annotations

from grounding_labels.labels.models import Label, ProtectionSettings
from grounding_labels.labels.priority import PriorityTier

DEFAULT_INTERNAL_ID = "internal-default"
INTERNAL_LABEL_NAME = "Internal"
DEFAULT_PUBLIC_ID = "public"
PUBLIC_LABEL_NAME = "Public"


def default_labels() -> list[Label]:
    """Return fresh copies of the five standard labels, lowest tier first."""
    return [
        Label(
            id="public",
            name="Public",
            description="Information that can be freely shared",
            priority=PriorityTier.PUBLIC,
            protection=ProtectionSettings(),
            color="#2E7D32",
            icon_name="globe",
        ),
        Label(
            id="internal",
            name="Internal",
            description="Information for internal use only",
            priority=PriorityTier.INTERNAL,
            protection=ProtectionSettings(),
            color="#1565C0",
            icon_name="building",
        ),
        Label(
            id="confidential",
            name="Confidential",
            description="Sensitive information requiring protection",
            priority=PriorityTier.CONFIDENTIAL,
            protection=ProtectionSettings(
                require_encryption=True,
                prevent_copy_paste=True,
            ),
            color="#F9A825",
            icon_name="lock",
        ),
        Label(
            id="highly-confidential",
            name="Highly Confidential",
            description="Highly sensitive information with strict access controls",
            priority=PriorityTier.HIGHLY_CONFIDENTIAL,
            protection=ProtectionSettings(
                require_encryption=True,
                prevent_extraction=True,
                prevent_copy_paste=True,
            ),
            color="#EF6C00",
            icon_name="key",
        ),
        Label(
            id="restricted",
            name="Restricted",
            description="Restricted information with maximum security",
            priority=PriorityTier.RESTRICTED,
            protection=ProtectionSettings(
                require_encryption=True,
                prevent_extraction=True,
                prevent_copy_paste=True,
                prevent_grounding=True,
                require_audit_log=True,
            ),
            color="#C62828",
            icon_name="block",
        ),
    ]


def default_internal_label() -> Label:
    """Synthesize the in-memory Internal label used when the store has none.

    The label carries no restrictions and is never persisted.
    """
    return Label(
        id=DEFAULT_INTERNAL_ID,
        name=INTERNAL_LABEL_NAME,
        description="Default internal sensitivity label",
        priority=PriorityTier.INTERNAL,
        protection=ProtectionSettings(),
    )


def default_public_label() -> Label:
    """Synthesize an unrestricted Public label for content with no grounding."""
    return Label(
        id=DEFAULT_PUBLIC_ID,
        name=PUBLIC_LABEL_NAME,
        description="Information that can be freely shared",
        priority=PriorityTier.PUBLIC,
        protection=ProtectionSettings(),
    )
