"""Label data model, priority tiers, stores and validation."""
from __future__ import annotations

from grounding_labels.labels.defaults import (
    default_internal_label,
    default_labels,
    default_public_label,
)
from grounding_labels.labels.models import (
    GroundingData,
    Label,
    ProtectionSettings,
    SensitivityLabelResponse,
)
from grounding_labels.labels.priority import (
    PriorityTier,
    can_override,
    compare,
    higher_of,
    is_higher,
    max_of,
)
from grounding_labels.labels.store import InMemoryLabelStore, JsonLabelStore, LabelStore
from grounding_labels.labels.validator import LabelValidator, ValidationResult

__all__ = [
    "GroundingData",
    "InMemoryLabelStore",
    "JsonLabelStore",
    "Label",
    "LabelStore",
    "LabelValidator",
    "PriorityTier",
    "ProtectionSettings",
    "SensitivityLabelResponse",
    "ValidationResult",
    "can_override",
    "compare",
    "default_internal_label",
    "default_labels",
    "default_public_label",
    "higher_of",
    "is_higher",
    "max_of",
]
