"""Protection policy enforcement, encryption and visual formatting."""
from __future__ import annotations

from grounding_labels.protection.encryption import EncryptionService, Encryptor
from grounding_labels.protection.formatter import LabelFormatter
from grounding_labels.protection.policy import PolicyEnforcer, ResponseFlags, requires_encryption

__all__ = [
    "EncryptionService",
    "Encryptor",
    "LabelFormatter",
    "PolicyEnforcer",
    "ResponseFlags",
    "requires_encryption",
]
