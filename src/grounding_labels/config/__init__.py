"""YAML configuration schema and loader."""
from __future__ import annotations

from grounding_labels.config.loader import (
    AgentConfig,
    AuditConfig,
    ClassificationConfig,
    ConfigLoader,
    EncryptionConfig,
    GroundingLabelsConfig,
    StoreConfig,
)

__all__ = [
    "AgentConfig",
    "AuditConfig",
    "ClassificationConfig",
    "ConfigLoader",
    "EncryptionConfig",
    "GroundingLabelsConfig",
    "StoreConfig",
]
