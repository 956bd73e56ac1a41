"""LLM response processor — labels generated output by the grounding it used.

The most sensitive valid label among the grounding items governs the
response.  A response produced without labelled grounding is Public.
"""
from __future__ import annotations

import logging
from typing import Iterable

from grounding_labels.config.loader import AgentConfig
from grounding_labels.labels.defaults import PUBLIC_LABEL_NAME, default_public_label
from grounding_labels.labels.models import GroundingData, Label, SensitivityLabelResponse
from grounding_labels.protection.encryption import Encryptor
from grounding_labels.service import SensitivityLabelService

logger = logging.getLogger(__name__)


class LLMResponseProcessor:
    """Applies grounding sensitivity to LLM responses.

    Parameters
    ----------
    service:
        Labelling service.
    encryptor:
        Encryption collaborator for :meth:`apply_encryption`.  Defaults to
        the service's encryptor.
    settings:
        Agent settings; ``enable_encryption`` gates :meth:`apply_encryption`.
    """

    def __init__(
        self,
        service: SensitivityLabelService,
        encryptor: Encryptor | None = None,
        settings: AgentConfig | None = None,
    ) -> None:
        self._service = service
        self._encryptor = encryptor or service.encryptor
        self._settings = settings or AgentConfig()

    def process_response(
        self,
        response: str,
        grounding: Iterable[GroundingData] | None = None,
    ) -> SensitivityLabelResponse:
        """Label ``response`` with the merged label of its grounding.

        Raises
        ------
        ValueError
            When ``response`` is empty.
        LabelError
            Propagated from response processing.
        """
        if not response:
            raise ValueError("Response cannot be empty")

        labels = [item.label for item in grounding or [] if item.label is not None]
        if not labels:
            return self._public_response(response)

        logger.debug("Processing LLM response with %d labelled grounding sources", len(labels))
        merged = self._service.get_highest_priority_label(labels)
        return self._service.process_llm_response(
            response, merged, allow_encryption=self._settings.enable_encryption
        )

    def usable_grounding(self, items: Iterable[GroundingData]) -> list[GroundingData]:
        """Return the items whose labels allow them to ground a response."""
        usable: list[GroundingData] = []
        for item in items:
            if self._can_ground(item):
                usable.append(item)
            else:
                logger.warning("Grounding data %s cannot be used due to its protection settings", item.id)
        return usable

    def format_with_visual_indicators(self, content: str, label: Label | None) -> str:
        return self._service.format_response_with_label(content, label)

    def apply_encryption(self, content: str, label: Label | None) -> str:
        """Encrypt ``content`` when encryption is enabled and ``label`` requires it."""
        if not content or label is None or not self._settings.enable_encryption:
            return content
        if not self._encryptor.should_encrypt(label):
            return content
        logger.debug("Applying encryption for label %s", label.id)
        return self._encryptor.encrypt(content, label)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _can_ground(self, item: GroundingData) -> bool:
        label = item.label
        if label is None:
            return True
        return (
            not label.settings.prevent_grounding
            and label.is_active
            and self._service.validate_label(label)
        )

    def _public_response(self, content: str) -> SensitivityLabelResponse:
        label = self._service.store.get_by_name(PUBLIC_LABEL_NAME)
        if label is None or not label.is_active:
            label = default_public_label()
        return self._service.build_response(
            content,
            label,
            {"classification_source": "ungrounded"},
            allow_encryption=self._settings.enable_encryption,
            visual_indicators=False,
        )
