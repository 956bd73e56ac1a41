"""Label validation.

A label is valid when:

- ``id`` and ``name`` are non-blank
- ``id`` matches ``[a-z0-9-]+``
- no *other* stored label uses the same name
- ``priority`` is one of the five tiers
- protection settings are present
- custom property keys are non-blank
- ``updated_at`` is not before ``created_at``

Example
-------
>>> validator = LabelValidator(InMemoryLabelStore(seed_defaults=True))
>>> validator.validate(Label(id="Bad Id", name="x"))
False
>>> validator.validate_detailed(Label(id="Bad Id", name="x")).errors
['Label ID must contain only lowercase letters, digits and hyphens']
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field

from grounding_labels.labels.models import GroundingData, Label
from grounding_labels.labels.priority import PriorityTier, can_override
from grounding_labels.labels.store import LabelStore

_ID_PATTERN: re.Pattern[str] = re.compile(r"^[a-z0-9-]+$")

SUPPORTED_DATA_TYPES_PROPERTY = "SupportedDataTypes"


@dataclass
class ValidationResult:
    """Outcome of validating one label."""

    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    label_id: str | None = None

    @property
    def error_message(self) -> str:
        return "; ".join(self.errors)

    @classmethod
    def success(cls, label_id: str | None = None) -> "ValidationResult":
        return cls(is_valid=True, label_id=label_id)

    @classmethod
    def failure(cls, errors: list[str], label_id: str | None = None) -> "ValidationResult":
        return cls(is_valid=False, errors=list(errors), label_id=label_id)

    def to_dict(self) -> dict[str, object]:
        return {
            "label_id": self.label_id,
            "is_valid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


class LabelValidator:
    """Validates labels against the store they will be used with.

    Parameters
    ----------
    store:
        Label store consulted for the name-uniqueness rule.
    """

    def __init__(self, store: LabelStore) -> None:
        self._store = store

    def validate(self, label: Label | None) -> bool:
        return self.validate_detailed(label).is_valid

    def validate_detailed(self, label: Label | None) -> ValidationResult:
        """Run every rule and collect all failures."""
        if label is None:
            return ValidationResult.failure(["Label cannot be null"])

        errors: list[str] = []
        warnings: list[str] = []

        if not label.id or not label.id.strip():
            errors.append("Label ID is required")
        elif not _ID_PATTERN.match(label.id):
            errors.append("Label ID must contain only lowercase letters, digits and hyphens")

        if not label.name or not label.name.strip():
            errors.append("Label name is required")
        else:
            existing = self._store.get_by_name(label.name)
            if existing is not None and existing.id != label.id:
                errors.append(f"Label name '{label.name}' is already used by '{existing.id}'")

        if not isinstance(label.priority, PriorityTier):
            errors.append("Invalid label priority")

        if label.protection is None:
            errors.append("Protection settings are required")
        elif label.protection.require_encryption and label.priority < PriorityTier.CONFIDENTIAL:
            warnings.append(
                "Encryption is only applied to Confidential or higher labels; "
                "require_encryption has no effect"
            )

        if any(not key or not key.strip() for key in label.custom_properties):
            errors.append("Custom property keys cannot be empty")

        if label.updated_at < label.created_at:
            errors.append("Updated date cannot be before created date")

        if not label.is_active:
            warnings.append("Label is inactive")

        return ValidationResult(
            is_valid=not errors,
            errors=errors,
            warnings=warnings,
            label_id=label.id or None,
        )

    # ------------------------------------------------------------------
    # Applicability
    # ------------------------------------------------------------------

    def can_apply(self, data: GroundingData, label: Label) -> bool:
        """Return ``True`` when ``label`` may be attached to ``data``.

        The label must be active, valid, compatible with the item's data
        type, and at least as sensitive as any label already attached.
        """
        if not label.is_active or not self.validate(label):
            return False
        if not is_data_type_supported(label, data.data_type):
            return False
        if data.label is not None and not can_override(data.label.priority, label.priority):
            return False
        return True

    @staticmethod
    def is_compatible(first: Label, second: Label) -> bool:
        """Return ``True`` when ``second`` keeps every hard protection of ``first``.

        Same-tier labels are always compatible.
        """
        if first.priority == second.priority:
            return True
        a, b = first.settings, second.settings
        if a.require_encryption and not b.require_encryption:
            return False
        if a.prevent_extraction and not b.prevent_extraction:
            return False
        return True


def is_data_type_supported(label: Label, data_type: str | None) -> bool:
    """Check ``data_type`` against the label's ``SupportedDataTypes`` property."""
    if not data_type:
        return True
    supported = label.custom_properties.get(SUPPORTED_DATA_TYPES_PROPERTY)
    if not supported:
        return True
    allowed = {item.strip().casefold() for item in supported.split(",") if item.strip()}
    return data_type.casefold() in allowed
