"""Label data model — Pydantic v2 models for labels, grounding data and responses.

Field names are snake_case in Python and camelCase on the JSON boundary
(``customProperties``, ``createdAt``, ...), so a label configuration file
written by any client of the store round-trips without loss.

Example
-------
>>> label = Label(id="restricted", name="Restricted", priority="Restricted")
>>> label.priority
<PriorityTier.RESTRICTED: 'Restricted'>
>>> label.model_dump(mode="json", by_alias=True)["isActive"]
True
"""
from __future__ import annotations

import hashlib
from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from grounding_labels.labels.priority import PriorityTier

_MODEL_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    "extra": "ignore",
}


def utcnow() -> datetime:
    """Timezone-aware current UTC time used for all label timestamps."""
    return datetime.now(tz=timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ---------------------------------------------------------------------------
# Protection settings
# ---------------------------------------------------------------------------


class ProtectionSettings(BaseModel):
    """Policy flags attached to a label.

    Attributes
    ----------
    require_encryption:
        Content must be encrypted before it leaves the core.  Only honoured
        for tiers at or above CONFIDENTIAL.
    prevent_extraction:
        Content must not be displayed or extracted.
    prevent_copy_paste:
        Copy/paste of the rendered content is not allowed.
    prevent_grounding:
        Content must not be used as LLM grounding data.
    allowed_users / allowed_groups:
        Simple allow-lists.  Empty lists allow everyone.
    expiration_time:
        Optional instant after which the protection no longer grants access.
    """

    model_config = _MODEL_CONFIG

    require_encryption: bool = False
    prevent_extraction: bool = False
    prevent_copy_paste: bool = False
    prevent_grounding: bool = False
    allowed_users: list[str] = Field(default_factory=list)
    allowed_groups: list[str] = Field(default_factory=list)
    encryption_algorithm: str = Field(default="AES-256-GCM", max_length=50)
    expiration_time: datetime | None = None
    require_watermark: bool = False
    require_audit_log: bool = False
    max_access_attempts: int = Field(default=-1, ge=-1)
    custom_rules: dict[str, bool] = Field(default_factory=dict)

    @field_validator("expiration_time")
    @classmethod
    def normalise_expiration(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value) if value is not None else None

    @property
    def is_restrictive(self) -> bool:
        return (
            self.require_encryption
            or self.prevent_extraction
            or self.prevent_copy_paste
            or self.prevent_grounding
        )

    def is_expired(self, now: datetime | None = None) -> bool:
        """Return ``True`` when ``expiration_time`` is set and has passed."""
        if self.expiration_time is None:
            return False
        return _as_utc(now or utcnow()) >= self.expiration_time

    def permits(self, user: str | None, groups: list[str] | None = None) -> bool:
        """Allow-list check for ``user`` and their ``groups``.

        When neither list is populated every caller is permitted.
        """
        if not self.allowed_users and not self.allowed_groups:
            return True
        if user is not None and user in self.allowed_users:
            return True
        return any(group in self.allowed_groups for group in (groups or []))

    def describe(self) -> str:
        """Short human-readable summary, e.g. ``"Encryption, No Copy/Paste"``."""
        restrictions: list[str] = []
        if self.require_encryption:
            restrictions.append("Encryption")
        if self.prevent_extraction:
            restrictions.append("No Extraction")
        if self.prevent_copy_paste:
            restrictions.append("No Copy/Paste")
        if self.prevent_grounding:
            restrictions.append("No Grounding")
        return ", ".join(restrictions) if restrictions else "No Restrictions"


# ---------------------------------------------------------------------------
# Label
# ---------------------------------------------------------------------------


class Label(BaseModel):
    """A named policy bundle with a priority tier and protection flags.

    Two labels are equal when their ids are equal.
    """

    model_config = _MODEL_CONFIG

    id: str = ""
    name: str = Field(default="", max_length=100)
    description: str = Field(default="", max_length=500)
    priority: PriorityTier = PriorityTier.PUBLIC
    protection: ProtectionSettings | None = Field(default_factory=ProtectionSettings)
    custom_properties: dict[str, str] = Field(default_factory=dict)
    is_active: bool = True
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    color: str = Field(default="#000000", max_length=7)
    icon_name: str = Field(default="default", max_length=50)

    @field_validator("priority", mode="before")
    @classmethod
    def parse_priority(cls, value: object) -> PriorityTier:
        return PriorityTier.from_value(value)

    @field_validator("created_at", "updated_at")
    @classmethod
    def normalise_timestamps(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @property
    def settings(self) -> ProtectionSettings:
        """Protection settings, with an unrestricted default when unset."""
        return self.protection if self.protection is not None else ProtectionSettings()

    def touch(self) -> "Label":
        """Return a copy with ``updated_at`` refreshed."""
        return self.model_copy(update={"updated_at": utcnow()})

    def to_record(self) -> dict[str, object]:
        """Return the camelCase JSON record persisted by label stores."""
        return self.model_dump(mode="json", by_alias=True)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Label):
            return self.id == other.id
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.id)

    def __str__(self) -> str:
        return f"{self.name} ({self.priority.display_name})"


# ---------------------------------------------------------------------------
# Grounding data
# ---------------------------------------------------------------------------


class GroundingData(BaseModel):
    """A content item supplied to, or produced by, an LLM pipeline.

    ``label`` is ``None`` for unclassified content, which is treated as
    Public until classified.
    """

    model_config = _MODEL_CONFIG

    id: str
    content: str = ""
    source: str = "unknown"
    data_type: str = "text"
    label: Label | None = None
    metadata: dict[str, object] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utcnow)
    last_modified: datetime = Field(default_factory=utcnow)
    is_active: bool = True
    version: str = "1.0"

    @field_validator("created_at", "last_modified")
    @classmethod
    def normalise_timestamps(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @property
    def is_classified(self) -> bool:
        return self.label is not None

    @property
    def effective_tier(self) -> PriorityTier:
        """Tier of the attached label, PUBLIC when unclassified."""
        return self.label.priority if self.label is not None else PriorityTier.PUBLIC

    @property
    def size_in_bytes(self) -> int:
        return len(self.content.encode("utf-8"))

    @property
    def checksum(self) -> str:
        return hashlib.sha256(self.content.encode("utf-8")).hexdigest()

    def __str__(self) -> str:
        label_name = self.label.name if self.label is not None else "No Label"
        return f"GroundingData: {self.id} ({self.data_type}) - {label_name}"


# ---------------------------------------------------------------------------
# Response
# ---------------------------------------------------------------------------


class SensitivityLabelResponse(BaseModel):
    """Externally visible result of classifying or processing content."""

    model_config = _MODEL_CONFIG

    label: Label
    content: str
    formatted_response: str
    should_display: bool = True
    allow_copy_paste: bool = True
    allow_grounding: bool = True
    requires_encryption: bool = False
    generated_at: datetime = Field(default_factory=utcnow)
    metadata: dict[str, object] = Field(default_factory=dict)
    warning_message: str | None = None

    def __str__(self) -> str:
        state = "Displayable" if self.should_display else "Restricted"
        return f"Response for {self.label.name}: {state}"
