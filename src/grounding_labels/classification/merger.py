"""Label merger — combines per-source labels into one effective label.

Used when a response draws on several grounding sources: the most
sensitive valid label among them governs the combined output.

Example
-------
>>> merger = LabelMerger(validator, resolver)
>>> merger.merge_highest_priority([internal, restricted, confidential]).id
'restricted'
>>> merger.merge_highest_priority([]).name
'Internal'
"""
from __future__ import annotations

import logging
from typing import Iterable

from grounding_labels.classification.resolver import LabelResolver
from grounding_labels.labels.models import Label
from grounding_labels.labels.priority import is_higher
from grounding_labels.labels.validator import LabelValidator

logger = logging.getLogger(__name__)


class LabelMerger:
    """Selects the highest-priority valid label from a collection.

    Parameters
    ----------
    validator:
        Labels failing validation are dropped before selection.
    resolver:
        Supplies the default Internal label when nothing valid remains.
    """

    def __init__(self, validator: LabelValidator, resolver: LabelResolver) -> None:
        self._validator = validator
        self._resolver = resolver

    def merge_highest_priority(self, labels: Iterable[Label | None]) -> Label:
        """Return the most sensitive valid label.

        Among labels sharing the highest tier the first one encountered
        wins.  An empty input, or one in which every label is invalid,
        yields the default Internal label; this method never raises for
        bad input.
        """
        winner: Label | None = None
        for label in labels:
            if label is None:
                continue
            if not self._validator.validate(label):
                logger.warning("Skipping invalid label '%s' during merge", label.id)
                continue
            if winner is None or is_higher(label.priority, winner.priority):
                winner = label

        if winner is None:
            return self._resolver.default_label()
        return winner
