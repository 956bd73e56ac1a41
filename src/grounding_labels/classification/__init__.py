"""Content classification, label resolution and label merging."""
from __future__ import annotations

from grounding_labels.classification.classifier import ContentClassifier
from grounding_labels.classification.merger import LabelMerger
from grounding_labels.classification.resolver import LabelResolver

__all__ = [
    "ContentClassifier",
    "LabelMerger",
    "LabelResolver",
]
