"""SensitivityLabelService — the labelling core behind the CLI and agent helpers.

All collaborators are passed in explicitly; :func:`build_service` wires
the standard implementations from a :class:`GroundingLabelsConfig`.

Response pipeline for a resolved label::

    derive flags -> encrypt (when required) -> format with visual label

Encryption happens before formatting so a sealed payload still carries a
readable classification banner.

Example
-------
::

    from grounding_labels import GroundingData, build_service

    service = build_service()
    response = service.classify(GroundingData(id="doc-1", content="SSN 123-45-6789"))
    print(response.label.name, response.allow_grounding)   # Restricted False
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from grounding_labels.audit.logger import ClassificationAuditLog
from grounding_labels.classification.classifier import ContentClassifier
from grounding_labels.classification.merger import LabelMerger
from grounding_labels.classification.resolver import LabelResolver
from grounding_labels.config.loader import GroundingLabelsConfig
from grounding_labels.detection.detector import PatternDetector
from grounding_labels.errors import LabelError
from grounding_labels.labels.models import GroundingData, Label, SensitivityLabelResponse, utcnow
from grounding_labels.labels.priority import can_override
from grounding_labels.labels.store import InMemoryLabelStore, JsonLabelStore, LabelStore
from grounding_labels.labels.validator import LabelValidator, is_data_type_supported
from grounding_labels.protection.encryption import EncryptionService, Encryptor
from grounding_labels.protection.formatter import LabelFormatter
from grounding_labels.protection.policy import PolicyEnforcer, ResponseFlags

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4


@dataclass
class BatchItemResult:
    """Outcome for one item of :meth:`SensitivityLabelService.classify_batch`.

    Exactly one of ``response`` and ``error`` is set.
    """

    item_id: str
    response: SensitivityLabelResponse | None = None
    error: LabelError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SensitivityLabelService:
    """Classifies content, enforces label policy and builds responses.

    Parameters
    ----------
    store:
        Label store.
    validator:
        Label validator bound to the same store.
    encryptor:
        Encryption collaborator.
    classifier:
        Content classifier; its resolver supplies fallback labels.
    formatter:
        Visual formatter.  Defaults to :class:`LabelFormatter`.
    enforcer:
        Policy enforcer.  Defaults to :class:`PolicyEnforcer`.
    audit_log:
        Optional audit trail.
    visual_indicators:
        Wrap response content in the label banner.
    encryption_enabled:
        Seal content whose label requires encryption.  When ``False`` the
        ``requires_encryption`` flag is still reported but content is left
        in plaintext.
    audit_all:
        Audit every decision.  When ``False`` only labels whose protection
        sets ``require_audit_log`` are audited.
    max_workers:
        Default thread-pool size for :meth:`classify_batch`.
    """

    def __init__(
        self,
        store: LabelStore,
        validator: LabelValidator,
        encryptor: Encryptor,
        classifier: ContentClassifier,
        formatter: LabelFormatter | None = None,
        enforcer: PolicyEnforcer | None = None,
        audit_log: ClassificationAuditLog | None = None,
        *,
        visual_indicators: bool = True,
        encryption_enabled: bool = True,
        audit_all: bool = True,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        self._store = store
        self._validator = validator
        self._encryptor = encryptor
        self._classifier = classifier
        self._resolver: LabelResolver = classifier.resolver
        self._merger = LabelMerger(validator, self._resolver)
        self._formatter = formatter or LabelFormatter()
        self._enforcer = enforcer or PolicyEnforcer()
        self._audit_log = audit_log
        self._visual_indicators = visual_indicators
        self._encryption_enabled = encryption_enabled
        self._audit_all = audit_all
        self._max_workers = max_workers

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def store(self) -> LabelStore:
        return self._store

    @property
    def validator(self) -> LabelValidator:
        return self._validator

    @property
    def encryptor(self) -> Encryptor:
        return self._encryptor

    @property
    def formatter(self) -> LabelFormatter:
        return self._formatter

    @property
    def enforcer(self) -> PolicyEnforcer:
        return self._enforcer

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def classify(self, data: GroundingData) -> SensitivityLabelResponse:
        """Label ``data`` and build the protected response.

        An attached label is validated and used as-is; otherwise the content
        is classified and the suggested label resolved.

        Raises
        ------
        ValueError
            When ``data`` is ``None``.
        LabelError
            ``INVALID_LABEL`` for an invalid attached label,
            ``ENCRYPTION_FAILURE`` when sealing fails, and
            ``CLASSIFICATION_FAILURE`` for anything unexpected.
        """
        if data is None:
            raise ValueError("Grounding data is required")

        confidence: float | None = None
        metadata: dict[str, object] = {"data_id": data.id}
        try:
            if data.label is not None:
                label = self._resolver.resolve_existing(data.label)
                metadata["classification_source"] = "existing"
            else:
                result = self._classifier.classify_content(data.content, data.metadata)
                label = result.suggested_label or self._resolver.default_label()
                confidence = result.confidence
                metadata.update(
                    classification_source="content",
                    confidence=result.confidence,
                    suggested_tier=result.suggested_tier.value,
                    detected_patterns=sorted({p.pattern_type for p in result.detected_patterns}),
                )
            response = self.build_response(data.content, label, metadata)
        except LabelError:
            raise
        except Exception as exc:
            logger.exception("Classification of %s failed", data.id)
            label_id = data.label.id if data.label is not None else None
            raise LabelError.classification_failure(str(exc), label_id=label_id) from exc

        logger.info("Classified %s as %s", data.id, label.id)
        if self._should_audit(label):
            self._audit_log.record_classified(data.id, label, confidence=confidence, source=data.source)
        return response

    def classify_batch(
        self,
        items: Iterable[GroundingData],
        max_workers: int | None = None,
    ) -> list[BatchItemResult]:
        """Classify independent items on a bounded thread pool.

        Results come back in submission order.  Per-item failures are
        returned as values on :class:`BatchItemResult` and never raised.
        """
        pending = list(items)
        if not pending:
            return []

        workers = max(1, min(max_workers or self._max_workers, len(pending)))
        logger.debug("Classifying batch of %d items with %d workers", len(pending), workers)
        results: list[BatchItemResult] = []
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="grounding-labels") as pool:
            futures = [(item, pool.submit(self.classify, item)) for item in pending]
            for item, future in futures:
                item_id = item.id if item is not None else "unknown"
                try:
                    results.append(BatchItemResult(item_id=item_id, response=future.result()))
                except LabelError as exc:
                    logger.warning("Batch item %s failed: %s", item_id, exc)
                    results.append(BatchItemResult(item_id=item_id, error=exc))
                except ValueError as exc:
                    logger.warning("Batch item %s rejected: %s", item_id, exc)
                    results.append(
                        BatchItemResult(item_id=item_id, error=LabelError.classification_failure(str(exc)))
                    )
        return results

    # ------------------------------------------------------------------
    # Responses
    # ------------------------------------------------------------------

    def process_llm_response(
        self,
        response: str,
        label: Label,
        *,
        allow_encryption: bool = True,
    ) -> SensitivityLabelResponse:
        """Apply ``label`` to a generated LLM response.

        ``allow_encryption=False`` keeps the response in plaintext even when
        the service would otherwise seal it.

        Raises
        ------
        ValueError
            When ``response`` is empty or ``label`` is ``None``.
        LabelError
            ``INVALID_LABEL`` when ``label`` fails validation.
        """
        if not response:
            raise ValueError("Response cannot be empty")
        if label is None:
            raise ValueError("A label is required to process a response")

        self._resolver.resolve_existing(label)
        result = self.build_response(
            response,
            label,
            {"classification_source": "response"},
            allow_encryption=allow_encryption,
        )
        if self._should_audit(label):
            encrypted = result.requires_encryption and self._encryption_enabled and allow_encryption
            self._audit_log.record_response_processed(label, encrypted=encrypted)
        return result

    def get_highest_priority_label(self, labels: Iterable[Label | None]) -> Label:
        return self._merger.merge_highest_priority(labels)

    def validate_label(self, label: Label | None) -> bool:
        return self._validator.validate(label)

    def format_response_with_label(self, content: str, label: Label | None) -> str:
        """Format ``content`` for ``label``; invalid or missing labels leave it untouched."""
        if not content or label is None or not self._validator.validate(label):
            return content
        return self._formatter.format_with_label(content, label)

    def derive_flags(self, label: Label) -> ResponseFlags:
        return self._enforcer.derive_flags(label)

    # ------------------------------------------------------------------
    # Reclassification
    # ------------------------------------------------------------------

    def reclassify(self, data: GroundingData, new_label: Label) -> GroundingData:
        """Return a copy of ``data`` carrying ``new_label``.

        Unclassified data accepts any valid label.  Classified data accepts
        a label at the same or a higher tier only.

        Raises
        ------
        LabelError
            ``INVALID_LABEL`` when ``new_label`` is invalid or does not
            support the item's data type; ``OVERRIDE_REJECTED`` when it is
            less sensitive than the current label.  ``data`` is unchanged
            in both cases.
        """
        self._resolver.resolve_existing(new_label)
        if not is_data_type_supported(new_label, data.data_type):
            raise LabelError.invalid_label(
                new_label.id, [f"Label does not support data type '{data.data_type}'"]
            )

        previous = data.label
        if previous is not None and not can_override(previous.priority, new_label.priority):
            logger.warning(
                "Rejected reclassification of %s from %s to %s",
                data.id,
                previous.priority.value,
                new_label.priority.value,
            )
            if self._should_audit(previous):
                self._audit_log.record_override_rejected(data.id, previous, new_label)
            raise LabelError.override_rejected(
                previous.id, previous.priority.value, new_label.priority.value
            )

        updated = data.model_copy(update={"label": new_label, "last_modified": utcnow()})
        logger.info(
            "Reclassified %s: %s -> %s",
            data.id,
            previous.id if previous is not None else "unclassified",
            new_label.id,
        )
        if self._should_audit(new_label):
            self._audit_log.record_reclassified(data.id, previous, new_label)
        return updated

    def build_response(
        self,
        content: str,
        label: Label,
        metadata: dict[str, object] | None = None,
        *,
        allow_encryption: bool = True,
        visual_indicators: bool | None = None,
    ) -> SensitivityLabelResponse:
        """Build the protected response for ``content`` under ``label``.

        The label is not validated here.  Flags always follow the label's
        protection settings; ``visual_indicators`` overrides the service
        default for this response only.
        """
        flags = self._enforcer.derive_flags(label)
        body = content
        if (
            self._encryption_enabled
            and allow_encryption
            and flags.requires_encryption
            and self._encryptor.should_encrypt(label)
        ):
            body = self._encryptor.encrypt(content, label)
        banner = self._visual_indicators if visual_indicators is None else visual_indicators
        formatted = self._formatter.format_with_label(body, label) if banner else body

        return SensitivityLabelResponse(
            label=label,
            content=content,
            formatted_response=formatted,
            should_display=flags.should_display,
            allow_copy_paste=flags.allow_copy_paste,
            allow_grounding=flags.allow_grounding,
            requires_encryption=flags.requires_encryption,
            metadata=dict(metadata or {}),
            warning_message=_warning_for(flags),
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _should_audit(self, label: Label) -> bool:
        if self._audit_log is None:
            return False
        return self._audit_all or label.settings.require_audit_log


def _warning_for(flags: ResponseFlags) -> str | None:
    warnings: list[str] = []
    if not flags.should_display:
        warnings.append("Content must not be displayed or extracted")
    if not flags.allow_copy_paste:
        warnings.append("Copy/paste is restricted")
    if not flags.allow_grounding:
        warnings.append("Content must not be used for grounding")
    return "; ".join(warnings) if warnings else None


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def build_service(
    config: GroundingLabelsConfig | None = None,
    *,
    store: LabelStore | None = None,
    encryptor: Encryptor | None = None,
) -> SensitivityLabelService:
    """Wire a :class:`SensitivityLabelService` from configuration.

    ``store`` and ``encryptor`` override the configured implementations.
    """
    config = config or GroundingLabelsConfig()

    if store is None:
        if config.store.path is not None:
            store = JsonLabelStore(Path(config.store.path), seed_defaults=config.store.seed_defaults)
        else:
            store = InMemoryLabelStore(seed_defaults=config.store.seed_defaults)
    if encryptor is None:
        encryptor = EncryptionService(key_env_var=config.encryption.key_env_var)

    validator = LabelValidator(store)
    detector = PatternDetector(include_keywords=config.classification.keyword_rules)
    classifier = ContentClassifier(LabelResolver(store, validator), detector=detector)
    audit_log = (
        ClassificationAuditLog(Path(config.audit.log_path))
        if config.audit.log_path is not None
        else None
    )
    return SensitivityLabelService(
        store=store,
        validator=validator,
        encryptor=encryptor,
        classifier=classifier,
        audit_log=audit_log,
        visual_indicators=config.agent.enable_visual_indicators,
        encryption_enabled=config.agent.enable_encryption,
        audit_all=config.agent.enable_audit_logging,
        max_workers=config.classification.max_workers,
    )
