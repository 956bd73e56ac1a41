"""Risk aggregation — turns a set of findings into a tier and a confidence.

The suggested tier comes from the *highest* risk level present, never an
average: a single Critical finding classifies content as Restricted no
matter how many Low findings accompany it.  Confidence is the fixed
constant of that same bucket.

==========  ===================  ==========
Risk level  Suggested tier       Confidence
==========  ===================  ==========
Critical    Restricted           0.95
High        HighlyConfidential   0.85
Medium      Confidential         0.75
Low         Internal             0.65
(none)      Public               0.90
==========  ===================  ==========
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable

from grounding_labels.detection.detector import DetectedPattern
from grounding_labels.detection.patterns import RiskLevel
from grounding_labels.labels.models import Label, ProtectionSettings
from grounding_labels.labels.priority import PriorityTier

CLEAN_CONFIDENCE = 0.90

_TIER_BY_RISK: dict[RiskLevel, PriorityTier] = {
    RiskLevel.CRITICAL: PriorityTier.RESTRICTED,
    RiskLevel.HIGH: PriorityTier.HIGHLY_CONFIDENTIAL,
    RiskLevel.MEDIUM: PriorityTier.CONFIDENTIAL,
    RiskLevel.LOW: PriorityTier.INTERNAL,
}

_CONFIDENCE_BY_RISK: dict[RiskLevel, float] = {
    RiskLevel.CRITICAL: 0.95,
    RiskLevel.HIGH: 0.85,
    RiskLevel.MEDIUM: 0.75,
    RiskLevel.LOW: 0.65,
}

# Pattern types whose high-risk findings also block extraction.
_EXTRACTION_SENSITIVE_TYPES: frozenset[str] = frozenset({"PersonalData", "Financial"})


@dataclass(frozen=True)
class RiskAssessment:
    """Aggregate outcome for one set of findings."""

    confidence: float
    suggested_tier: PriorityTier
    highest_risk: RiskLevel | None = None


@dataclass
class ClassificationResult:
    """Result of classifying one piece of content.

    Consumed by the service immediately; never persisted.
    ``suggested_label`` is the label the resolver picked.
    """

    suggested_label_id: str
    confidence: float
    suggested_tier: PriorityTier = PriorityTier.PUBLIC
    detected_patterns: list[DetectedPattern] = field(default_factory=list)
    recommended_protections: ProtectionSettings = field(default_factory=ProtectionSettings)
    analysis_metadata: dict[str, object] = field(default_factory=dict)
    suggested_label: Label | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "suggested_label_id": self.suggested_label_id,
            "suggested_tier": self.suggested_tier.value,
            "confidence": self.confidence,
            "detected_patterns": [p.to_dict() for p in self.detected_patterns],
            "recommended_protections": self.recommended_protections.model_dump(mode="json"),
        }


class RiskAggregator:
    """Maps findings to a suggested tier using a max-over-findings policy."""

    def aggregate(self, patterns: Iterable[DetectedPattern]) -> RiskAssessment:
        highest = highest_risk(patterns)
        if highest is None:
            return RiskAssessment(confidence=CLEAN_CONFIDENCE, suggested_tier=PriorityTier.PUBLIC)
        return RiskAssessment(
            confidence=_CONFIDENCE_BY_RISK[highest],
            suggested_tier=_TIER_BY_RISK[highest],
            highest_risk=highest,
        )

    def recommend_protections(self, patterns: Iterable[DetectedPattern]) -> ProtectionSettings:
        """Suggest protection flags for content with these findings.

        - encryption when any Critical or High finding exists
        - no extraction when a Critical/High finding is personal or financial
        - no copy/paste for any Critical/High finding or more than two Medium
        - no grounding when any Critical finding exists
        """
        findings = list(patterns)
        severe = [p for p in findings if p.risk_level in (RiskLevel.CRITICAL, RiskLevel.HIGH)]
        medium_count = sum(1 for p in findings if p.risk_level == RiskLevel.MEDIUM)
        return ProtectionSettings(
            require_encryption=bool(severe),
            prevent_extraction=any(p.pattern_type in _EXTRACTION_SENSITIVE_TYPES for p in severe),
            prevent_copy_paste=bool(severe) or medium_count > 2,
            prevent_grounding=any(p.risk_level == RiskLevel.CRITICAL for p in findings),
        )

    @staticmethod
    def analysis_metadata(
        content: str,
        metadata: dict[str, object] | None = None,
    ) -> dict[str, object]:
        """Describe the analysed content; caller metadata is prefixed ``input_``."""
        result: dict[str, object] = {
            "content_length": len(content),
            "word_count": len(content.split()),
            "analysis_timestamp": datetime.now(tz=timezone.utc).isoformat(),
        }
        for key, value in (metadata or {}).items():
            result[f"input_{key}"] = value
        return result


def highest_risk(patterns: Iterable[DetectedPattern]) -> RiskLevel | None:
    """Return the highest risk level among ``patterns``, or ``None``."""
    levels = [p.risk_level for p in patterns]
    if not levels:
        return None
    return max(levels, key=lambda level: level.rank)


def tier_for_risk(level: RiskLevel | None) -> PriorityTier:
    """Tier suggested for a risk level; PUBLIC when there were no findings."""
    if level is None:
        return PriorityTier.PUBLIC
    return _TIER_BY_RISK[level]
