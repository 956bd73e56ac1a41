"""Tests for the rule table and PatternDetector."""
from __future__ import annotations

import re

import pytest

from grounding_labels.detection.detector import DetectedPattern, PatternDetector
from grounding_labels.detection.patterns import (
    DEFAULT_RULES,
    KEYWORD_CATEGORY,
    PatternRule,
    RiskLevel,
    rules_by_type,
)


@pytest.fixture()
def detector() -> PatternDetector:
    return PatternDetector()


def _types(patterns: list[DetectedPattern]) -> list[str]:
    return [p.pattern_type for p in patterns]


# ---------------------------------------------------------------------------
# Rule table
# ---------------------------------------------------------------------------


class TestRuleTable:
    def test_ten_rules(self) -> None:
        assert len(DEFAULT_RULES) == 10

    def test_rule_types_unique(self) -> None:
        assert len(rules_by_type()) == len(DEFAULT_RULES)

    @pytest.mark.parametrize(
        "pattern_type, risk, confidence",
        [
            ("SSN", RiskLevel.CRITICAL, 0.95),
            ("CreditCard", RiskLevel.CRITICAL, 0.90),
            ("BankAccount", RiskLevel.CRITICAL, 0.85),
            ("Email", RiskLevel.LOW, 0.90),
            ("Phone", RiskLevel.LOW, 0.85),
            ("Financial", RiskLevel.HIGH, 0.75),
            ("Confidential", RiskLevel.HIGH, 0.80),
            ("PersonalData", RiskLevel.MEDIUM, 0.70),
            ("TechnicalIP", RiskLevel.MEDIUM, 0.75),
            ("Internal", RiskLevel.LOW, 0.65),
        ],
    )
    def test_rule_constants(self, pattern_type: str, risk: RiskLevel, confidence: float) -> None:
        rule = rules_by_type()[pattern_type]
        assert rule.risk_level is risk
        assert rule.confidence == confidence

    def test_risk_level_ranks(self) -> None:
        assert [level.rank for level in RiskLevel] == [0, 1, 2, 3]

    def test_keyword_rules(self) -> None:
        keyword_types = {r.pattern_type for r in DEFAULT_RULES if r.category == KEYWORD_CATEGORY}
        assert keyword_types == {"Financial", "Confidential", "PersonalData", "TechnicalIP", "Internal"}


# ---------------------------------------------------------------------------
# Identifiers and contact details
# ---------------------------------------------------------------------------


class TestStructuredPatterns:
    def test_ssn(self, detector: PatternDetector) -> None:
        patterns = detector.detect("SSN 123-45-6789")
        assert _types(patterns) == ["SSN"]
        finding = patterns[0]
        assert finding.start == 4
        assert finding.length == 11
        assert finding.matched_text == "123-45-6789"
        assert finding.risk_level is RiskLevel.CRITICAL

    @pytest.mark.parametrize("card", ["4111 1111 1111 1111", "4111-1111-1111-1111", "4111111111111111"])
    def test_credit_card(self, detector: PatternDetector, card: str) -> None:
        assert _types(detector.detect(f"card {card}")) == ["CreditCard"]

    def test_bank_account(self, detector: PatternDetector) -> None:
        assert _types(detector.detect("acct 12345678")) == ["BankAccount"]

    def test_short_number_not_account(self, detector: PatternDetector) -> None:
        assert detector.detect("ticket 1234567") == []

    def test_email(self, detector: PatternDetector) -> None:
        assert _types(detector.detect("mail alice@example.com")) == ["Email"]

    def test_phone(self, detector: PatternDetector) -> None:
        patterns = detector.detect("call 555-123-4567")
        assert _types(patterns) == ["Phone"]
        assert patterns[0].risk_level is RiskLevel.LOW


# ---------------------------------------------------------------------------
# Keywords
# ---------------------------------------------------------------------------


class TestKeywordPatterns:
    @pytest.mark.parametrize(
        "text, pattern_type",
        [
            ("the annual budget", "Financial"),
            ("SALARY review", "Financial"),
            ("a proprietary design", "Confidential"),
            ("home address", "PersonalData"),
            ("the source code", "TechnicalIP"),
            ("team meeting", "Internal"),
        ],
    )
    def test_keywords(self, detector: PatternDetector, text: str, pattern_type: str) -> None:
        assert pattern_type in detector.detect_types(text)

    def test_keywords_need_word_boundaries(self, detector: PatternDetector) -> None:
        assert detector.detect("teammates costume") == []

    def test_each_occurrence_reported(self, detector: PatternDetector) -> None:
        patterns = detector.detect("meeting after meeting")
        assert _types(patterns) == ["Internal", "Internal"]
        assert patterns[0].start < patterns[1].start

    def test_keywords_disabled(self) -> None:
        detector = PatternDetector(include_keywords=False)
        assert detector.detect("confidential budget meeting") == []
        assert _types(detector.detect("SSN 123-45-6789")) == ["SSN"]
        assert all(rule.category != KEYWORD_CATEGORY for rule in detector.rules)


# ---------------------------------------------------------------------------
# Detector behaviour
# ---------------------------------------------------------------------------


class TestDetector:
    @pytest.mark.parametrize("content", ["", None])
    def test_empty_content(self, detector: PatternDetector, content: str | None) -> None:
        assert detector.detect(content) == []
        assert not detector.contains_sensitive(content)

    def test_clean_content(self, detector: PatternDetector) -> None:
        assert detector.detect("The weather is nice today") == []

    def test_results_sorted_by_start(self, detector: PatternDetector) -> None:
        patterns = detector.detect("email bob@example.com about the budget and SSN 123-45-6789")
        starts = [p.start for p in patterns]
        assert starts == sorted(starts)
        assert set(_types(patterns)) == {"Email", "Financial", "SSN"}

    def test_contains_sensitive(self, detector: PatternDetector) -> None:
        assert detector.contains_sensitive("SSN 123-45-6789")
        assert not detector.contains_sensitive("hello world")

    def test_extra_rules_appended(self) -> None:
        rule = PatternRule(
            pattern_type="ProjectCode",
            regex=re.compile(r"\bPRJ-\d{4}\b"),
            risk_level=RiskLevel.HIGH,
            confidence=0.8,
            description="Project code detected",
        )
        detector = PatternDetector(extra_rules=[rule])
        assert detector.rules[-1] is rule
        assert _types(detector.detect("see PRJ-0042")) == ["ProjectCode"]

    def test_custom_rule_table(self) -> None:
        detector = PatternDetector(rules=(rules_by_type()["Email"],))
        assert detector.detect("SSN 123-45-6789") == []

    def test_to_dict(self, detector: PatternDetector) -> None:
        payload = detector.detect("SSN 123-45-6789")[0].to_dict()
        assert payload == {
            "pattern_type": "SSN",
            "risk_level": "Critical",
            "confidence": 0.95,
            "start": 4,
            "length": 11,
            "description": "Social Security Number detected",
        }

    def test_detection_is_pure(self, detector: PatternDetector) -> None:
        text = "budget 123-45-6789"
        assert detector.detect(text) == detector.detect(text)
