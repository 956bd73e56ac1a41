"""Tests for RiskAggregator and its helpers."""
from __future__ import annotations

import pytest

from grounding_labels.detection.aggregator import (
    CLEAN_CONFIDENCE,
    ClassificationResult,
    RiskAggregator,
    highest_risk,
    tier_for_risk,
)
from grounding_labels.detection.detector import DetectedPattern
from grounding_labels.detection.patterns import RiskLevel
from grounding_labels.labels.priority import PriorityTier


@pytest.fixture()
def aggregator() -> RiskAggregator:
    return RiskAggregator()


def _finding(risk: RiskLevel, pattern_type: str = "Test", start: int = 0) -> DetectedPattern:
    return DetectedPattern(pattern_type=pattern_type, risk_level=risk, confidence=0.5, start=start, end=start + 1)


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


class TestAggregate:
    def test_no_findings_is_public(self, aggregator: RiskAggregator) -> None:
        assessment = aggregator.aggregate([])
        assert assessment.suggested_tier is PriorityTier.PUBLIC
        assert assessment.confidence == CLEAN_CONFIDENCE == 0.90
        assert assessment.highest_risk is None

    @pytest.mark.parametrize(
        "risk, tier, confidence",
        [
            (RiskLevel.CRITICAL, PriorityTier.RESTRICTED, 0.95),
            (RiskLevel.HIGH, PriorityTier.HIGHLY_CONFIDENTIAL, 0.85),
            (RiskLevel.MEDIUM, PriorityTier.CONFIDENTIAL, 0.75),
            (RiskLevel.LOW, PriorityTier.INTERNAL, 0.65),
        ],
    )
    def test_bucket_mapping(
        self, aggregator: RiskAggregator, risk: RiskLevel, tier: PriorityTier, confidence: float
    ) -> None:
        assessment = aggregator.aggregate([_finding(risk)])
        assert assessment.suggested_tier is tier
        assert assessment.confidence == confidence

    def test_one_critical_outweighs_many_low(self, aggregator: RiskAggregator) -> None:
        findings = [_finding(RiskLevel.LOW, start=i) for i in range(50)]
        findings.append(_finding(RiskLevel.CRITICAL, start=99))
        assessment = aggregator.aggregate(findings)
        assert assessment.suggested_tier is PriorityTier.RESTRICTED
        assert assessment.highest_risk is RiskLevel.CRITICAL

    def test_order_independent(self, aggregator: RiskAggregator) -> None:
        findings = [_finding(RiskLevel.MEDIUM), _finding(RiskLevel.HIGH), _finding(RiskLevel.LOW)]
        assert aggregator.aggregate(findings) == aggregator.aggregate(list(reversed(findings)))

    def test_accepts_generator(self, aggregator: RiskAggregator) -> None:
        assessment = aggregator.aggregate(_finding(level) for level in (RiskLevel.LOW, RiskLevel.HIGH))
        assert assessment.suggested_tier is PriorityTier.HIGHLY_CONFIDENTIAL


class TestHelpers:
    def test_highest_risk_empty(self) -> None:
        assert highest_risk([]) is None

    def test_highest_risk(self) -> None:
        assert highest_risk([_finding(RiskLevel.LOW), _finding(RiskLevel.MEDIUM)]) is RiskLevel.MEDIUM

    def test_tier_for_risk(self) -> None:
        assert tier_for_risk(None) is PriorityTier.PUBLIC
        assert tier_for_risk(RiskLevel.HIGH) is PriorityTier.HIGHLY_CONFIDENTIAL


# ---------------------------------------------------------------------------
# Protection recommendations
# ---------------------------------------------------------------------------


class TestRecommendProtections:
    def test_nothing_found(self, aggregator: RiskAggregator) -> None:
        assert not aggregator.recommend_protections([]).is_restrictive

    def test_critical(self, aggregator: RiskAggregator) -> None:
        settings = aggregator.recommend_protections([_finding(RiskLevel.CRITICAL, "SSN")])
        assert settings.require_encryption
        assert settings.prevent_copy_paste
        assert settings.prevent_grounding
        assert not settings.prevent_extraction

    def test_high_financial_blocks_extraction(self, aggregator: RiskAggregator) -> None:
        settings = aggregator.recommend_protections([_finding(RiskLevel.HIGH, "Financial")])
        assert settings.prevent_extraction
        assert not settings.prevent_grounding

    def test_three_medium_block_copy_paste(self, aggregator: RiskAggregator) -> None:
        settings = aggregator.recommend_protections([_finding(RiskLevel.MEDIUM, start=i) for i in range(3)])
        assert settings.prevent_copy_paste
        assert not settings.require_encryption

    def test_two_medium_allow_copy_paste(self, aggregator: RiskAggregator) -> None:
        settings = aggregator.recommend_protections([_finding(RiskLevel.MEDIUM, start=i) for i in range(2)])
        assert not settings.prevent_copy_paste


# ---------------------------------------------------------------------------
# Metadata / result
# ---------------------------------------------------------------------------


class TestAnalysisMetadata:
    def test_describes_content(self) -> None:
        metadata = RiskAggregator.analysis_metadata("one two three", {"source": "crm"})
        assert metadata["content_length"] == 13
        assert metadata["word_count"] == 3
        assert metadata["input_source"] == "crm"
        assert "analysis_timestamp" in metadata

    def test_result_to_dict(self) -> None:
        result = ClassificationResult(
            suggested_label_id="restricted",
            confidence=0.95,
            suggested_tier=PriorityTier.RESTRICTED,
            detected_patterns=[_finding(RiskLevel.CRITICAL, "SSN")],
        )
        payload = result.to_dict()
        assert payload["suggested_tier"] == "Restricted"
        assert payload["detected_patterns"][0]["pattern_type"] == "SSN"  # type: ignore[index]
        assert payload["recommended_protections"]["require_encryption"] is False  # type: ignore[index]
