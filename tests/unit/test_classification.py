"""Tests for LabelResolver, LabelMerger and ContentClassifier."""
from __future__ import annotations

import pytest

from grounding_labels.classification.classifier import ContentClassifier
from grounding_labels.classification.merger import LabelMerger
from grounding_labels.classification.resolver import LabelResolver
from grounding_labels.detection.detector import DetectedPattern, PatternDetector
from grounding_labels.errors import ErrorKind, LabelError
from grounding_labels.labels.defaults import DEFAULT_INTERNAL_ID
from grounding_labels.labels.models import Label
from grounding_labels.labels.priority import PriorityTier
from grounding_labels.labels.store import InMemoryLabelStore
from grounding_labels.labels.validator import LabelValidator


@pytest.fixture()
def store() -> InMemoryLabelStore:
    return InMemoryLabelStore(seed_defaults=True)


@pytest.fixture()
def resolver(store: InMemoryLabelStore) -> LabelResolver:
    return LabelResolver(store, LabelValidator(store))


@pytest.fixture()
def merger(store: InMemoryLabelStore, resolver: LabelResolver) -> LabelMerger:
    return LabelMerger(LabelValidator(store), resolver)


@pytest.fixture()
def classifier(resolver: LabelResolver) -> ContentClassifier:
    return ContentClassifier(resolver)


def _stored(store: InMemoryLabelStore, label_id: str) -> Label:
    label = store.get_by_id(label_id)
    assert label is not None
    return label


class _ExplodingDetector(PatternDetector):
    def detect(self, content: str | None) -> list[DetectedPattern]:
        raise RuntimeError("regex engine on fire")


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


class TestLabelResolver:
    @pytest.mark.parametrize(
        "tier, label_id",
        [
            (PriorityTier.PUBLIC, "public"),
            (PriorityTier.INTERNAL, "internal"),
            (PriorityTier.CONFIDENTIAL, "confidential"),
            (PriorityTier.HIGHLY_CONFIDENTIAL, "highly-confidential"),
            (PriorityTier.RESTRICTED, "restricted"),
        ],
    )
    def test_resolves_store_label(self, resolver: LabelResolver, tier: PriorityTier, label_id: str) -> None:
        assert resolver.resolve(tier).id == label_id

    def test_skips_inactive_labels(self, store: InMemoryLabelStore, resolver: LabelResolver) -> None:
        restricted = _stored(store, "restricted")
        store.update(restricted.model_copy(update={"is_active": False}))
        assert resolver.resolve(PriorityTier.RESTRICTED).id == "internal"

    def test_falls_back_to_store_internal(self, store: InMemoryLabelStore, resolver: LabelResolver) -> None:
        store.delete("confidential")
        assert resolver.resolve(PriorityTier.CONFIDENTIAL).id == "internal"

    def test_synthesizes_internal_when_store_empty(self) -> None:
        store = InMemoryLabelStore()
        resolver = LabelResolver(store, LabelValidator(store))
        label = resolver.resolve(PriorityTier.RESTRICTED)
        assert label.id == DEFAULT_INTERNAL_ID
        assert label.priority is PriorityTier.INTERNAL
        assert store.get_all() == []

    def test_resolve_existing_valid(self, store: InMemoryLabelStore, resolver: LabelResolver) -> None:
        label = _stored(store, "confidential")
        assert resolver.resolve_existing(label) is label

    def test_resolve_existing_invalid(self, resolver: LabelResolver) -> None:
        with pytest.raises(LabelError) as exc_info:
            resolver.resolve_existing(Label(id="Not Valid", name="Whatever"))
        err = exc_info.value
        assert err.kind is ErrorKind.INVALID_LABEL
        assert err.label_id == "Not Valid"
        assert err.errors

    def test_resolve_existing_blank_id(self, resolver: LabelResolver) -> None:
        with pytest.raises(LabelError) as exc_info:
            resolver.resolve_existing(Label(id="", name="Whatever"))
        assert exc_info.value.label_id == "unknown"


# ---------------------------------------------------------------------------
# Merger
# ---------------------------------------------------------------------------


class TestLabelMerger:
    def test_highest_wins(self, store: InMemoryLabelStore, merger: LabelMerger) -> None:
        labels = [_stored(store, "internal"), _stored(store, "restricted"), _stored(store, "confidential")]
        assert merger.merge_highest_priority(labels).id == "restricted"

    def test_first_of_equal_tier_wins(self, merger: LabelMerger) -> None:
        first = Label(id="team-a", name="Team A", priority=PriorityTier.CONFIDENTIAL)
        second = Label(id="team-b", name="Team B", priority=PriorityTier.CONFIDENTIAL)
        assert merger.merge_highest_priority([first, second]).id == "team-a"

    def test_empty_returns_internal(self, merger: LabelMerger) -> None:
        assert merger.merge_highest_priority([]).name == "Internal"

    def test_invalid_labels_dropped(self, store: InMemoryLabelStore, merger: LabelMerger) -> None:
        invalid = Label(id="BAD ID", name="Bad", priority=PriorityTier.RESTRICTED)
        merged = merger.merge_highest_priority([invalid, _stored(store, "confidential")])
        assert merged.id == "confidential"

    def test_all_invalid_returns_internal(self, merger: LabelMerger) -> None:
        invalid = Label(id="BAD ID", name="Bad", priority=PriorityTier.RESTRICTED)
        assert merger.merge_highest_priority([invalid, None]).id == "internal"

    @pytest.mark.parametrize("label_id", ["public", "internal", "confidential", "highly-confidential", "restricted"])
    def test_single_valid_label_returned_unchanged(
        self, store: InMemoryLabelStore, merger: LabelMerger, label_id: str
    ) -> None:
        label = _stored(store, label_id)
        assert merger.merge_highest_priority([label]) is label

    def test_single_invalid_label_returns_internal(self, store: InMemoryLabelStore, merger: LabelMerger) -> None:
        invalid = Label(id="BAD ID", name="Bad", priority=PriorityTier.RESTRICTED)
        assert merger.merge_highest_priority([invalid]) is _stored(store, "internal")

    def test_single_invalid_label_on_empty_store_synthesizes_internal(self) -> None:
        store = InMemoryLabelStore()
        validator = LabelValidator(store)
        merger = LabelMerger(validator, LabelResolver(store, validator))
        merged = merger.merge_highest_priority([Label(id="BAD ID", name="Bad")])
        assert merged.id == DEFAULT_INTERNAL_ID
        assert merged.priority is PriorityTier.INTERNAL

    def test_result_is_one_of_inputs(self, store: InMemoryLabelStore, merger: LabelMerger) -> None:
        labels = store.get_all()
        assert merger.merge_highest_priority(labels) in labels

    def test_merge_at_least_every_valid_input(self, store: InMemoryLabelStore, merger: LabelMerger) -> None:
        labels = store.get_all()
        merged = merger.merge_highest_priority(labels)
        assert all(merged.priority >= label.priority for label in labels)


# ---------------------------------------------------------------------------
# Classifier
# ---------------------------------------------------------------------------


class TestContentClassifier:
    def test_ssn_is_restricted(self, classifier: ContentClassifier) -> None:
        result = classifier.classify_content("SSN 123-45-6789")
        assert result.suggested_label_id == "restricted"
        assert result.suggested_tier is PriorityTier.RESTRICTED
        assert result.confidence == 0.95
        assert [p.pattern_type for p in result.detected_patterns] == ["SSN"]
        assert result.recommended_protections.prevent_grounding

    def test_result_carries_resolved_label(self, store: InMemoryLabelStore, classifier: ContentClassifier) -> None:
        result = classifier.classify_content("SSN 123-45-6789")
        assert result.suggested_label is _stored(store, "restricted")

    def test_result_carries_synthesized_label(self) -> None:
        store = InMemoryLabelStore()
        classifier = ContentClassifier(LabelResolver(store, LabelValidator(store)))
        result = classifier.classify_content("SSN 123-45-6789")
        assert result.suggested_label is not None
        assert result.suggested_label.id == result.suggested_label_id == DEFAULT_INTERNAL_ID

    def test_meeting_notes_are_internal(self, classifier: ContentClassifier) -> None:
        result = classifier.classify_content("Quarterly meeting notes")
        assert result.suggested_label_id == "internal"
        assert result.confidence == 0.65

    def test_clean_content_is_public(self, classifier: ContentClassifier) -> None:
        result = classifier.classify_content("The weather is nice today")
        assert result.suggested_label_id == "public"
        assert result.confidence == 0.90
        assert result.detected_patterns == []

    @pytest.mark.parametrize("content", ["", None])
    def test_empty_content_is_public(self, classifier: ContentClassifier, content: str | None) -> None:
        result = classifier.classify_content(content)
        assert result.suggested_tier is PriorityTier.PUBLIC
        assert result.analysis_metadata["content_length"] == 0

    def test_metadata_passed_through(self, classifier: ContentClassifier) -> None:
        result = classifier.classify_content("hello", {"source": "wiki"})
        assert result.analysis_metadata["input_source"] == "wiki"

    def test_detector_failure_wrapped(self, resolver: LabelResolver) -> None:
        classifier = ContentClassifier(resolver, detector=_ExplodingDetector())
        with pytest.raises(LabelError) as exc_info:
            classifier.classify_content("anything")
        assert exc_info.value.kind is ErrorKind.CLASSIFICATION_FAILURE
        assert exc_info.value.label_id == "unknown"
        assert "regex engine on fire" in exc_info.value.message

    def test_keyword_free_detector(self, resolver: LabelResolver) -> None:
        classifier = ContentClassifier(resolver, detector=PatternDetector(include_keywords=False))
        assert classifier.classify_content("confidential budget").suggested_label_id == "public"

    def test_resolver_property(self, classifier: ContentClassifier, resolver: LabelResolver) -> None:
        assert classifier.resolver is resolver
