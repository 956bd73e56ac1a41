"""Content classifier — detector, aggregator and resolver wired together.

Example
-------
>>> store = InMemoryLabelStore(seed_defaults=True)
>>> classifier = ContentClassifier(LabelResolver(store, LabelValidator(store)))
>>> result = classifier.classify_content("SSN 123-45-6789")
>>> result.suggested_label_id, result.confidence
('restricted', 0.95)
"""
from __future__ import annotations

import logging

from grounding_labels.classification.resolver import LabelResolver
from grounding_labels.detection.aggregator import ClassificationResult, RiskAggregator
from grounding_labels.detection.detector import PatternDetector
from grounding_labels.errors import LabelError

logger = logging.getLogger(__name__)


class ContentClassifier:
    """Derives a suggested label for raw content.

    Parameters
    ----------
    resolver:
        Maps the suggested tier to a concrete label.
    detector:
        Pattern detector.  A default detector is created when omitted.
    aggregator:
        Risk aggregator.  A default aggregator is created when omitted.
    """

    def __init__(
        self,
        resolver: LabelResolver,
        detector: PatternDetector | None = None,
        aggregator: RiskAggregator | None = None,
    ) -> None:
        self._resolver = resolver
        self._detector = detector or PatternDetector()
        self._aggregator = aggregator or RiskAggregator()

    @property
    def resolver(self) -> LabelResolver:
        return self._resolver

    def classify_content(
        self,
        content: str | None,
        metadata: dict[str, object] | None = None,
    ) -> ClassificationResult:
        """Classify ``content`` and resolve the suggested label.

        Empty content is classified as clean Public content.

        Raises
        ------
        LabelError
            ``CLASSIFICATION_FAILURE`` for any unexpected error, with label
            id ``"unknown"``.
        """
        text = content or ""
        try:
            patterns = self._detector.detect(text)
            assessment = self._aggregator.aggregate(patterns)
            label = self._resolver.resolve(assessment.suggested_tier)
            result = ClassificationResult(
                suggested_label_id=label.id,
                suggested_label=label,
                confidence=assessment.confidence,
                suggested_tier=assessment.suggested_tier,
                detected_patterns=patterns,
                recommended_protections=self._aggregator.recommend_protections(patterns),
                analysis_metadata=self._aggregator.analysis_metadata(text, metadata),
            )
        except LabelError:
            raise
        except Exception as exc:
            logger.exception("Content classification failed")
            raise LabelError.classification_failure(str(exc)) from exc

        logger.debug(
            "Classified content (%d chars): %d findings, tier=%s, label=%s",
            len(text),
            len(patterns),
            assessment.suggested_tier.value,
            label.id,
        )
        return result
