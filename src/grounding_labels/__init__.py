"""grounding-labels — sensitivity labels for LLM grounding data and responses.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import grounding_labels as gl
>>> service = gl.build_service()
>>> response = service.classify(gl.GroundingData(id="doc-1", content="SSN 123-45-6789"))
>>> response.label.name, response.allow_grounding
('Restricted', False)
"""
from __future__ import annotations

__version__: str = "0.1.0"

from grounding_labels.convenience import Labeler
from grounding_labels.errors import ErrorKind, LabelError

# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------
from grounding_labels.labels.defaults import default_internal_label, default_labels
from grounding_labels.labels.models import (
    GroundingData,
    Label,
    ProtectionSettings,
    SensitivityLabelResponse,
)
from grounding_labels.labels.priority import PriorityTier, can_override, higher_of, max_of
from grounding_labels.labels.store import InMemoryLabelStore, JsonLabelStore, LabelStore
from grounding_labels.labels.validator import LabelValidator, ValidationResult

# ---------------------------------------------------------------------------
# Detection and classification
# ---------------------------------------------------------------------------
from grounding_labels.detection.aggregator import ClassificationResult, RiskAggregator
from grounding_labels.detection.detector import DetectedPattern, PatternDetector
from grounding_labels.detection.patterns import DEFAULT_RULES, PatternRule, RiskLevel
from grounding_labels.classification.classifier import ContentClassifier
from grounding_labels.classification.merger import LabelMerger
from grounding_labels.classification.resolver import LabelResolver

# ---------------------------------------------------------------------------
# Protection
# ---------------------------------------------------------------------------
from grounding_labels.protection.encryption import EncryptionService, Encryptor
from grounding_labels.protection.formatter import LabelFormatter
from grounding_labels.protection.policy import PolicyEnforcer, ResponseFlags

# ---------------------------------------------------------------------------
# Service, integration, config, audit, output
# ---------------------------------------------------------------------------
from grounding_labels.service import BatchItemResult, SensitivityLabelService, build_service
from grounding_labels.integration.grounding_processor import GroundingDataProcessor
from grounding_labels.integration.response_processor import LLMResponseProcessor
from grounding_labels.config.loader import ConfigLoader, GroundingLabelsConfig
from grounding_labels.audit.logger import ClassificationAuditLog
from grounding_labels.output.renderer import ResultRenderer

__all__ = [
    "__version__",
    # Convenience
    "Labeler",
    # Errors
    "ErrorKind",
    "LabelError",
    # Labels
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
    "default_internal_label",
    "default_labels",
    "higher_of",
    "max_of",
    # Detection and classification
    "ClassificationResult",
    "ContentClassifier",
    "DEFAULT_RULES",
    "DetectedPattern",
    "LabelMerger",
    "LabelResolver",
    "PatternDetector",
    "PatternRule",
    "RiskAggregator",
    "RiskLevel",
    # Protection
    "EncryptionService",
    "Encryptor",
    "LabelFormatter",
    "PolicyEnforcer",
    "ResponseFlags",
    # Service and integration
    "BatchItemResult",
    "GroundingDataProcessor",
    "LLMResponseProcessor",
    "SensitivityLabelService",
    "build_service",
    # Config, audit, output
    "ClassificationAuditLog",
    "ConfigLoader",
    "GroundingLabelsConfig",
    "ResultRenderer",
]
