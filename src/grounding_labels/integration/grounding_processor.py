"""Grounding data processor — prepares source content for use as LLM grounding.

Raw content is wrapped as :class:`GroundingData`, labelled, and filtered
against the agent settings before it reaches a prompt:

- items whose label prevents grounding are dropped
- inactive or invalid labels are dropped
- labels above ``max_allowed_priority`` are dropped
- with ``strict_validation`` on, content length, source, data type and
  age are checked as well
"""
from __future__ import annotations

import logging
import uuid
from typing import Iterable

from grounding_labels.config.loader import AgentConfig
from grounding_labels.labels.models import GroundingData, Label, utcnow
from grounding_labels.service import SensitivityLabelService

logger = logging.getLogger(__name__)

PROCESSOR_VERSION = "1.0"


class GroundingDataProcessor:
    """Classifies, filters and validates grounding data for an agent.

    Parameters
    ----------
    service:
        Labelling service used for classification and validation.
    settings:
        Agent settings.  Defaults apply when omitted.
    """

    def __init__(
        self,
        service: SensitivityLabelService,
        settings: AgentConfig | None = None,
    ) -> None:
        self._service = service
        self._settings = settings or AgentConfig()

    @property
    def settings(self) -> AgentConfig:
        return self._settings

    def process_raw_data(
        self,
        raw_data: str,
        source: str | None = None,
        data_type: str | None = None,
    ) -> GroundingData:
        """Wrap ``raw_data`` as a new grounding item and label it.

        With ``auto_classify_unlabeled`` off the item receives the label
        named by ``default_classification`` instead of being classified.

        Raises
        ------
        ValueError
            When ``raw_data`` is empty.
        LabelError
            Propagated from classification.
        """
        if not raw_data:
            raise ValueError("Raw data cannot be empty")

        data = GroundingData(
            id=str(uuid.uuid4()),
            content=raw_data,
            source=source or "unknown",
            data_type=data_type or "text",
            metadata={
                "processed_at": utcnow().isoformat(),
                "processor_version": PROCESSOR_VERSION,
            },
        )
        logger.debug("Processing raw data %s from source=%s type=%s", data.id, data.source, data.data_type)

        if self._settings.auto_classify_unlabeled:
            label = self._service.classify(data).label
        else:
            label = self._default_classification()
        labelled = data.model_copy(update={"label": label})

        logger.debug("Processed grounding data %s with label %s", labelled.id, label.name)
        return labelled

    def filter_grounding_data(self, items: Iterable[GroundingData]) -> list[GroundingData]:
        """Return the items that may be used as grounding, in input order."""
        kept: list[GroundingData] = []
        for item in items:
            if self._should_include(item):
                kept.append(item)
            else:
                logger.info("Filtered out grounding data %s due to its label policy", item.id)
        logger.debug("Kept %d grounding items", len(kept))
        return kept

    def aggregate_sensitivity(self, items: Iterable[GroundingData]) -> Label | None:
        """Return the most sensitive label across ``items``, or ``None`` if none are labelled."""
        labels = [item.label for item in items if item.label is not None]
        if not labels:
            return None
        merged = self._service.get_highest_priority_label(labels)
        logger.debug("Aggregated sensitivity: %s (%s)", merged.name, merged.priority.value)
        return merged

    def validate_grounding_data(self, item: GroundingData | None) -> bool:
        """Check integrity of ``item``, plus the strict checks when enabled."""
        if item is None or not item.id or not item.content:
            return False
        if item.label is not None and not self._service.validate_label(item.label):
            logger.warning("Invalid label on grounding data %s", item.id)
            return False
        if self._settings.strict_validation:
            return self._passes_strict_checks(item)
        return True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _should_include(self, item: GroundingData) -> bool:
        label = item.label
        if label is None:
            return True
        if label.settings.prevent_grounding or not label.is_active:
            return False
        limit = self._settings.max_allowed_priority
        if limit is not None and label.priority > limit:
            return False
        return self._service.validate_label(label)

    def _passes_strict_checks(self, item: GroundingData) -> bool:
        settings = self._settings
        if len(item.content) > settings.max_content_length:
            logger.debug("Grounding data %s exceeds %d characters", item.id, settings.max_content_length)
            return False
        if item.source not in settings.allowed_sources:
            logger.debug("Grounding data %s has disallowed source %s", item.id, item.source)
            return False
        if item.data_type not in settings.allowed_data_types:
            logger.debug("Grounding data %s has disallowed type %s", item.id, item.data_type)
            return False
        if utcnow() - item.last_modified > settings.max_data_age:
            logger.debug("Grounding data %s is older than %s", item.id, settings.max_data_age)
            return False
        return True

    def _default_classification(self) -> Label:
        store = self._service.store
        wanted = self._settings.default_classification
        label = store.get_by_id(wanted) or store.get_by_name(wanted)
        if label is not None and label.is_active:
            return label
        return self._service.get_highest_priority_label([])
