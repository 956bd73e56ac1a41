"""Tests for PriorityTier and the priority comparator."""
from __future__ import annotations

import pytest

from grounding_labels.labels.priority import (
    PriorityTier,
    can_override,
    compare,
    higher_of,
    is_higher,
    max_of,
)

ALL_TIERS = list(PriorityTier)


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------


class TestOrdering:
    def test_ranks_follow_declaration_order(self) -> None:
        assert [tier.rank for tier in ALL_TIERS] == [0, 1, 2, 3, 4]

    def test_public_below_restricted(self) -> None:
        assert PriorityTier.PUBLIC < PriorityTier.RESTRICTED

    def test_comparisons_use_rank_not_string_value(self) -> None:
        # "HighlyConfidential" < "Internal" as strings, but not as tiers.
        assert PriorityTier.HIGHLY_CONFIDENTIAL > PriorityTier.INTERNAL

    def test_sorted_orders_by_rank(self) -> None:
        shuffled = [
            PriorityTier.RESTRICTED,
            PriorityTier.PUBLIC,
            PriorityTier.CONFIDENTIAL,
            PriorityTier.INTERNAL,
            PriorityTier.HIGHLY_CONFIDENTIAL,
        ]
        assert sorted(shuffled) == ALL_TIERS

    def test_ge_and_le_are_reflexive(self) -> None:
        for tier in ALL_TIERS:
            assert tier >= tier
            assert tier <= tier

    def test_display_name(self) -> None:
        assert PriorityTier.HIGHLY_CONFIDENTIAL.display_name == "Highly Confidential"
        assert PriorityTier.PUBLIC.display_name == "Public"


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class TestFromValue:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("Restricted", PriorityTier.RESTRICTED),
            ("restricted", PriorityTier.RESTRICTED),
            ("Highly Confidential", PriorityTier.HIGHLY_CONFIDENTIAL),
            ("highly_confidential", PriorityTier.HIGHLY_CONFIDENTIAL),
            ("highly-confidential", PriorityTier.HIGHLY_CONFIDENTIAL),
            (0, PriorityTier.PUBLIC),
            (4, PriorityTier.RESTRICTED),
            ("2", PriorityTier.CONFIDENTIAL),
            (PriorityTier.INTERNAL, PriorityTier.INTERNAL),
        ],
    )
    def test_accepts_names_and_ordinals(self, value: object, expected: PriorityTier) -> None:
        assert PriorityTier.from_value(value) is expected

    @pytest.mark.parametrize("value", ["Secret", 5, -1, True, None, 2.0])
    def test_rejects_unknown_values(self, value: object) -> None:
        with pytest.raises(ValueError):
            PriorityTier.from_value(value)


# ---------------------------------------------------------------------------
# Comparator
# ---------------------------------------------------------------------------


class TestComparator:
    def test_compare_signs(self) -> None:
        assert compare(PriorityTier.PUBLIC, PriorityTier.INTERNAL) == -1
        assert compare(PriorityTier.INTERNAL, PriorityTier.INTERNAL) == 0
        assert compare(PriorityTier.RESTRICTED, PriorityTier.INTERNAL) == 1

    def test_is_higher_is_strict(self) -> None:
        assert is_higher(PriorityTier.RESTRICTED, PriorityTier.CONFIDENTIAL)
        assert not is_higher(PriorityTier.CONFIDENTIAL, PriorityTier.CONFIDENTIAL)

    def test_higher_of_returns_more_sensitive(self) -> None:
        assert higher_of(PriorityTier.INTERNAL, PriorityTier.RESTRICTED) is PriorityTier.RESTRICTED
        assert higher_of(PriorityTier.RESTRICTED, PriorityTier.INTERNAL) is PriorityTier.RESTRICTED

    def test_max_of(self) -> None:
        tiers = [PriorityTier.INTERNAL, PriorityTier.HIGHLY_CONFIDENTIAL, PriorityTier.PUBLIC]
        assert max_of(tiers) is PriorityTier.HIGHLY_CONFIDENTIAL

    def test_max_of_empty_is_public(self) -> None:
        assert max_of([]) is PriorityTier.PUBLIC

    def test_max_of_accepts_generator(self) -> None:
        assert max_of(t for t in ALL_TIERS) is PriorityTier.RESTRICTED


class TestCanOverride:
    @pytest.mark.parametrize("existing", ALL_TIERS)
    @pytest.mark.parametrize("new", ALL_TIERS)
    def test_override_iff_new_at_least_existing(
        self, existing: PriorityTier, new: PriorityTier
    ) -> None:
        assert can_override(existing, new) is (new.rank >= existing.rank)

    def test_equal_tier_is_overridable(self) -> None:
        assert can_override(PriorityTier.CONFIDENTIAL, PriorityTier.CONFIDENTIAL)

    def test_downgrade_rejected(self) -> None:
        assert not can_override(PriorityTier.RESTRICTED, PriorityTier.INTERNAL)
