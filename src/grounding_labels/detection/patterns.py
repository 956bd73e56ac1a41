"""Sensitive-content rule table.

Each rule pairs a pattern type with a compiled regex, a risk level and a
base confidence.  The table is built once at import time and never
mutated; detectors that need extra rules take them as constructor
arguments.

Rules fall into three categories:

- ``identifier`` — structured identifiers (SSN, card and account numbers)
- ``keyword``    — plain-vocabulary heuristics (financial, confidential, ...)
- ``contact``    — contact details (email, phone)
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum


class RiskLevel(str, Enum):
    """Ordered risk levels for a single finding."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"

    @property
    def rank(self) -> int:
        return list(RiskLevel).index(self)


@dataclass(frozen=True)
class PatternRule:
    """One row of the rule table.

    Attributes
    ----------
    pattern_type:
        Stable name reported on every finding (e.g. ``"SSN"``).
    regex:
        Compiled pattern; every non-overlapping match is a finding.
    risk_level:
        Risk assigned to each match.
    confidence:
        Base confidence (0-1) assigned to each match.
    description:
        Human-readable description of a finding.
    category:
        ``"identifier"``, ``"keyword"`` or ``"contact"``.
    """

    pattern_type: str
    regex: re.Pattern[str]
    risk_level: RiskLevel
    confidence: float
    description: str
    category: str = "identifier"


# ---------------------------------------------------------------------------
# Identifiers
# ---------------------------------------------------------------------------
SSN = PatternRule(
    pattern_type="SSN",
    regex=re.compile(r"\b\d{3}-\d{2}-\d{4}\b"),
    risk_level=RiskLevel.CRITICAL,
    confidence=0.95,
    description="Social Security Number detected",
)

CREDIT_CARD = PatternRule(
    pattern_type="CreditCard",
    regex=re.compile(r"\b\d{4}[-\s]?\d{4}[-\s]?\d{4}[-\s]?\d{4}\b"),
    risk_level=RiskLevel.CRITICAL,
    confidence=0.90,
    description="Credit card number detected",
)

BANK_ACCOUNT = PatternRule(
    pattern_type="BankAccount",
    regex=re.compile(r"\b\d{8,12}\b"),
    risk_level=RiskLevel.CRITICAL,
    confidence=0.85,
    description="Bank account number detected",
)

# ---------------------------------------------------------------------------
# Keyword categories
# ---------------------------------------------------------------------------
FINANCIAL = PatternRule(
    pattern_type="Financial",
    regex=re.compile(
        r"\b(salary|wage|income|revenue|profit|loss|financial|budget|cost)\b",
        re.IGNORECASE,
    ),
    risk_level=RiskLevel.HIGH,
    confidence=0.75,
    description="Financial information detected",
    category="keyword",
)

CONFIDENTIAL = PatternRule(
    pattern_type="Confidential",
    regex=re.compile(
        r"\b(confidential|secret|private|proprietary|classified)\b",
        re.IGNORECASE,
    ),
    risk_level=RiskLevel.HIGH,
    confidence=0.80,
    description="Confidential keyword detected",
    category="keyword",
)

PERSONAL_DATA = PatternRule(
    pattern_type="PersonalData",
    regex=re.compile(
        r"\b(name|address|birthday|age|gender|nationality)\b",
        re.IGNORECASE,
    ),
    risk_level=RiskLevel.MEDIUM,
    confidence=0.70,
    description="Personal data detected",
    category="keyword",
)

TECHNICAL_IP = PatternRule(
    pattern_type="TechnicalIP",
    regex=re.compile(
        r"\b(patent|trademark|copyright|algorithm|source code|technical)\b",
        re.IGNORECASE,
    ),
    risk_level=RiskLevel.MEDIUM,
    confidence=0.75,
    description="Technical intellectual property detected",
    category="keyword",
)

INTERNAL = PatternRule(
    pattern_type="Internal",
    regex=re.compile(
        r"\b(internal|company|corporate|organization|meeting|team)\b",
        re.IGNORECASE,
    ),
    risk_level=RiskLevel.LOW,
    confidence=0.65,
    description="Internal company information detected",
    category="keyword",
)

# ---------------------------------------------------------------------------
# Contact details
# ---------------------------------------------------------------------------
EMAIL = PatternRule(
    pattern_type="Email",
    regex=re.compile(
        r"\b[A-Za-z0-9._%+\-]+@[A-Za-z0-9.\-]+\.[A-Za-z]{2,}\b",
        re.IGNORECASE,
    ),
    risk_level=RiskLevel.LOW,
    confidence=0.90,
    description="Email address detected",
    category="contact",
)

PHONE = PatternRule(
    pattern_type="Phone",
    regex=re.compile(r"\b\d{3}-\d{3}-\d{4}\b"),
    risk_level=RiskLevel.LOW,
    confidence=0.85,
    description="Phone number detected",
    category="contact",
)

# ---------------------------------------------------------------------------
# Exported table
# ---------------------------------------------------------------------------
DEFAULT_RULES: tuple[PatternRule, ...] = (
    SSN,
    CREDIT_CARD,
    EMAIL,
    PHONE,
    FINANCIAL,
    BANK_ACCOUNT,
    CONFIDENTIAL,
    INTERNAL,
    PERSONAL_DATA,
    TECHNICAL_IP,
)

KEYWORD_CATEGORY = "keyword"


def rules_by_type(rules: tuple[PatternRule, ...] = DEFAULT_RULES) -> dict[str, PatternRule]:
    """Index ``rules`` by pattern type."""
    return {rule.pattern_type: rule for rule in rules}
