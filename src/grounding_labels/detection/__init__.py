"""Sensitive-content detection and risk aggregation.

Provides the immutable rule table, the regex-based pattern detector, and
the aggregator that turns findings into a suggested priority tier.
"""
from __future__ import annotations

from grounding_labels.detection.aggregator import (
    CLEAN_CONFIDENCE,
    ClassificationResult,
    RiskAggregator,
    RiskAssessment,
)
from grounding_labels.detection.detector import DetectedPattern, PatternDetector
from grounding_labels.detection.patterns import DEFAULT_RULES, PatternRule, RiskLevel

__all__ = [
    "CLEAN_CONFIDENCE",
    "ClassificationResult",
    "DEFAULT_RULES",
    "DetectedPattern",
    "PatternDetector",
    "PatternRule",
    "RiskAggregator",
    "RiskAssessment",
    "RiskLevel",
]
