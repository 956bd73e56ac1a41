"""Pattern detector — scans text against the sensitive-content rule table.

Every match of every rule is reported as its own finding.  The same span
may be reported by several rules (e.g. a 16-digit number is both a card
number and, in part, an account number); no de-duplication is done.

Example
-------
>>> detector = PatternDetector()
>>> [p.pattern_type for p in detector.detect("SSN 123-45-6789")]
['SSN']
>>> detector.detect("")
[]
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from grounding_labels.detection.patterns import (
    DEFAULT_RULES,
    KEYWORD_CATEGORY,
    PatternRule,
    RiskLevel,
)


@dataclass(frozen=True)
class DetectedPattern:
    """A single rule match within scanned content.

    Attributes
    ----------
    pattern_type:
        Rule name, e.g. ``"SSN"`` or ``"Email"``.
    risk_level:
        Risk level of the rule that matched.
    confidence:
        Base confidence of the rule (0-1).
    start:
        Start offset of the match.
    end:
        End offset (exclusive) of the match.
    matched_text:
        The matched substring.
    description:
        Human-readable description.
    """

    pattern_type: str
    risk_level: RiskLevel
    confidence: float
    start: int
    end: int
    matched_text: str = ""
    description: str = ""

    @property
    def length(self) -> int:
        return self.end - self.start

    def to_dict(self) -> dict[str, object]:
        return {
            "pattern_type": self.pattern_type,
            "risk_level": self.risk_level.value,
            "confidence": self.confidence,
            "start": self.start,
            "length": self.length,
            "description": self.description,
        }


class PatternDetector:
    """Scans text for sensitive patterns.

    Parameters
    ----------
    rules:
        Rule table to use.  Defaults to :data:`DEFAULT_RULES`.
    extra_rules:
        Additional rules appended after ``rules``.
    include_keywords:
        When ``False`` the plain-vocabulary keyword rules are skipped and
        only structured identifiers and contact details are reported.
    """

    def __init__(
        self,
        rules: tuple[PatternRule, ...] = DEFAULT_RULES,
        extra_rules: tuple[PatternRule, ...] | list[PatternRule] | None = None,
        include_keywords: bool = True,
    ) -> None:
        selected = tuple(rules) + tuple(extra_rules or ())
        if not include_keywords:
            selected = tuple(r for r in selected if r.category != KEYWORD_CATEGORY)
        self._rules: tuple[PatternRule, ...] = selected

    @property
    def rules(self) -> tuple[PatternRule, ...]:
        return self._rules

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def iter_detect(self, content: str | None) -> Iterator[DetectedPattern]:
        """Yield findings rule by rule, in match order within each rule."""
        if not content:
            return
        for rule in self._rules:
            for match in rule.regex.finditer(content):
                yield DetectedPattern(
                    pattern_type=rule.pattern_type,
                    risk_level=rule.risk_level,
                    confidence=rule.confidence,
                    start=match.start(),
                    end=match.end(),
                    matched_text=match.group(),
                    description=rule.description,
                )

    def detect(self, content: str | None) -> list[DetectedPattern]:
        """Return every finding, ordered by start offset.

        Findings that start at the same offset keep rule-table order.
        ``None`` or empty content yields an empty list.
        """
        findings = list(self.iter_detect(content))
        findings.sort(key=lambda p: p.start)
        return findings

    def contains_sensitive(self, content: str | None) -> bool:
        """Return ``True`` as soon as any rule matches."""
        if not content:
            return False
        return any(rule.regex.search(content) for rule in self._rules)

    def detect_types(self, content: str | None) -> set[str]:
        """Return the set of pattern types found in ``content``."""
        return {p.pattern_type for p in self.iter_detect(content)}
