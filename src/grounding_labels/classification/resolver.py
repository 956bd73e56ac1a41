"""Label resolver — maps a suggested tier to a concrete label.

Lookup order for a tier:

1. the first active store label at that tier
2. the store label named ``"Internal"``
3. a synthesized in-memory Internal label with no restrictions

Resolution never fails because of missing configuration.  A label that
the caller supplies explicitly is validated instead, and an invalid one
raises ``INVALID_LABEL``; it is never silently downgraded.
"""
from __future__ import annotations

import logging

from grounding_labels.errors import LabelError
from grounding_labels.labels.defaults import INTERNAL_LABEL_NAME, default_internal_label
from grounding_labels.labels.models import Label
from grounding_labels.labels.priority import PriorityTier
from grounding_labels.labels.store import LabelStore
from grounding_labels.labels.validator import LabelValidator

logger = logging.getLogger(__name__)


class LabelResolver:
    """Resolves tiers and caller-supplied labels against a label store.

    Parameters
    ----------
    store:
        Store to look labels up in.
    validator:
        Validator used for caller-supplied labels.
    """

    def __init__(self, store: LabelStore, validator: LabelValidator) -> None:
        self._store = store
        self._validator = validator

    def resolve(self, tier: PriorityTier) -> Label:
        """Return the label that governs content classified at ``tier``."""
        for label in self._store.get_by_priority(tier):
            if label.is_active:
                return label
        logger.debug("No active label at tier %s; falling back to Internal", tier.value)
        return self.default_label()

    def resolve_existing(self, label: Label) -> Label:
        """Validate a caller-supplied label and return it unchanged.

        Raises
        ------
        LabelError
            ``INVALID_LABEL`` with the validation errors attached.
        """
        result = self._validator.validate_detailed(label)
        if not result.is_valid:
            raise LabelError.invalid_label(label.id or "unknown", result.errors)
        return label

    def default_label(self) -> Label:
        """Return the store's Internal label or a synthesized one."""
        internal = self._store.get_by_name(INTERNAL_LABEL_NAME)
        if internal is not None:
            return internal
        return default_internal_label()
