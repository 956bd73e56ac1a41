"""Label priority tiers and the priority comparator.

Tiers are totally ordered by their ordinal rank::

    PUBLIC < INTERNAL < CONFIDENTIAL < HIGHLY_CONFIDENTIAL < RESTRICTED

Example
-------
>>> higher_of(PriorityTier.INTERNAL, PriorityTier.RESTRICTED)
<PriorityTier.RESTRICTED: 'Restricted'>
>>> can_override(PriorityTier.CONFIDENTIAL, PriorityTier.CONFIDENTIAL)
True
"""
from __future__ import annotations

from enum import Enum
from typing import Iterable


class PriorityTier(str, Enum):
    """Ordered sensitivity tiers.  Values are the persisted names."""

    PUBLIC = "Public"
    INTERNAL = "Internal"
    CONFIDENTIAL = "Confidential"
    HIGHLY_CONFIDENTIAL = "HighlyConfidential"
    RESTRICTED = "Restricted"

    @property
    def rank(self) -> int:
        """Ordinal value, 0 for PUBLIC through 4 for RESTRICTED."""
        return list(PriorityTier).index(self)

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @classmethod
    def from_value(cls, value: object) -> "PriorityTier":
        """Parse a tier from its name, display name, or ordinal.

        Raises
        ------
        ValueError
            When ``value`` does not name one of the five tiers.
        """
        if isinstance(value, PriorityTier):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Invalid priority tier: {value!r}")
        if isinstance(value, int):
            tiers = list(cls)
            if 0 <= value < len(tiers):
                return tiers[value]
            raise ValueError(f"Invalid priority tier ordinal: {value}")
        if isinstance(value, str):
            key = value.replace(" ", "").replace("_", "").replace("-", "").lower()
            for tier in cls:
                if tier.value.lower() == key:
                    return tier
            if key.isdigit():
                return cls.from_value(int(key))
        raise ValueError(f"Invalid priority tier: {value!r}")

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, PriorityTier):
            return NotImplemented
        return self.rank >= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, PriorityTier):
            return NotImplemented
        return self.rank > other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, PriorityTier):
            return NotImplemented
        return self.rank <= other.rank

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, PriorityTier):
            return NotImplemented
        return self.rank < other.rank


_DISPLAY_NAMES: dict[PriorityTier, str] = {
    PriorityTier.PUBLIC: "Public",
    PriorityTier.INTERNAL: "Internal",
    PriorityTier.CONFIDENTIAL: "Confidential",
    PriorityTier.HIGHLY_CONFIDENTIAL: "Highly Confidential",
    PriorityTier.RESTRICTED: "Restricted",
}


# ---------------------------------------------------------------------------
# Comparator
# ---------------------------------------------------------------------------


def compare(a: PriorityTier, b: PriorityTier) -> int:
    """Return -1, 0 or 1 as ``a`` ranks below, equal to, or above ``b``."""
    return (a.rank > b.rank) - (a.rank < b.rank)


def is_higher(a: PriorityTier, b: PriorityTier) -> bool:
    """Return ``True`` when ``a`` is strictly more sensitive than ``b``."""
    return compare(a, b) > 0


def higher_of(a: PriorityTier, b: PriorityTier) -> PriorityTier:
    """Return the more sensitive tier.  Ties return ``a``."""
    return b if is_higher(b, a) else a


def max_of(tiers: Iterable[PriorityTier]) -> PriorityTier:
    """Return the most sensitive tier, or PUBLIC for an empty iterable."""
    result = PriorityTier.PUBLIC
    for tier in tiers:
        result = higher_of(result, tier)
    return result


def can_override(existing: PriorityTier, new: PriorityTier) -> bool:
    """Return ``True`` when a label at ``new`` may replace one at ``existing``.

    Equal tiers are overridable so that a same-tier reclassification can
    refresh a label's descriptive content.
    """
    return compare(new, existing) >= 0
