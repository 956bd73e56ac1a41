"""Error kinds raised by the label classification core.

Every failure the core surfaces is a :class:`LabelError` carrying an
:class:`ErrorKind` discriminant, so callers (the CLI in particular) can
render kind-specific messages without parsing strings.

Example
-------
>>> err = LabelError.encryption_failure("restricted", "decrypt", "label mismatch")
>>> err.kind
<ErrorKind.ENCRYPTION_FAILURE: 'encryption_failure'>
>>> err.operation
'decrypt'
"""
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Discriminant for :class:`LabelError`."""

    INVALID_LABEL = "invalid_label"
    LABEL_NOT_FOUND = "label_not_found"
    ENCRYPTION_FAILURE = "encryption_failure"
    CLASSIFICATION_FAILURE = "classification_failure"
    DUPLICATE_LABEL = "duplicate_label"
    STORAGE_FAILURE = "storage_failure"
    OVERRIDE_REJECTED = "override_rejected"
    UNAUTHORIZED_ACCESS = "unauthorized_access"


class LabelError(Exception):
    """Single error type for all label, encryption and classification failures.

    Attributes
    ----------
    kind:
        Which failure occurred.
    label_id:
        Id of the label involved, or ``"unknown"`` when no label had been
        resolved yet.
    message:
        Human-readable explanation.
    operation:
        Operation name for ``ENCRYPTION_FAILURE`` (``"encrypt"`` /
        ``"decrypt"``).
    errors:
        Validation errors for ``INVALID_LABEL``.
    user:
        Requesting user for ``UNAUTHORIZED_ACCESS``.
    """

    def __init__(
        self,
        kind: ErrorKind,
        label_id: str,
        message: str,
        *,
        operation: str | None = None,
        errors: list[str] | None = None,
        user: str | None = None,
    ) -> None:
        self.kind = kind
        self.label_id = label_id
        self.message = message
        self.operation = operation
        self.errors: list[str] = list(errors or [])
        self.user = user
        super().__init__(f"[{kind.value}] label '{label_id}': {message}")

    # ------------------------------------------------------------------
    # Named constructors
    # ------------------------------------------------------------------

    @classmethod
    def invalid_label(cls, label_id: str, errors: list[str]) -> "LabelError":
        detail = "; ".join(errors) if errors else "label failed validation"
        return cls(ErrorKind.INVALID_LABEL, label_id, detail, errors=errors)

    @classmethod
    def not_found(cls, label_id: str) -> "LabelError":
        return cls(ErrorKind.LABEL_NOT_FOUND, label_id, "label does not exist")

    @classmethod
    def encryption_failure(cls, label_id: str, operation: str, reason: str) -> "LabelError":
        return cls(
            ErrorKind.ENCRYPTION_FAILURE,
            label_id,
            f"{operation} failed: {reason}",
            operation=operation,
        )

    @classmethod
    def classification_failure(cls, reason: str, label_id: str | None = None) -> "LabelError":
        return cls(
            ErrorKind.CLASSIFICATION_FAILURE,
            label_id or "unknown",
            f"classification failed: {reason}",
        )

    @classmethod
    def duplicate(cls, label_id: str, field_name: str, value: str) -> "LabelError":
        return cls(
            ErrorKind.DUPLICATE_LABEL,
            label_id,
            f"a label with {field_name} '{value}' already exists",
        )

    @classmethod
    def storage_failure(cls, reason: str, label_id: str = "unknown") -> "LabelError":
        return cls(ErrorKind.STORAGE_FAILURE, label_id, reason)

    @classmethod
    def override_rejected(cls, label_id: str, existing: str, proposed: str) -> "LabelError":
        return cls(
            ErrorKind.OVERRIDE_REJECTED,
            label_id,
            f"cannot replace {existing} classification with lower tier {proposed}",
        )

    @classmethod
    def unauthorized(cls, label_id: str, user: str, reason: str) -> "LabelError":
        return cls(ErrorKind.UNAUTHORIZED_ACCESS, label_id, reason, user=user)

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serialisable view of the error."""
        payload: dict[str, object] = {
            "kind": self.kind.value,
            "label_id": self.label_id,
            "message": self.message,
        }
        if self.operation is not None:
            payload["operation"] = self.operation
        if self.errors:
            payload["errors"] = list(self.errors)
        if self.user is not None:
            payload["user"] = self.user
        return payload
