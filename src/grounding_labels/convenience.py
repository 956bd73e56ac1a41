"""Convenience API for grounding-labels — 3-line quickstart.

Example
-------
::

    from grounding_labels import Labeler
    labeler = Labeler()
    print(labeler.classify_text("SSN 123-45-6789").label.name)   # Restricted

"""
from __future__ import annotations

import uuid
from pathlib import Path

from grounding_labels.config.loader import ConfigLoader, GroundingLabelsConfig
from grounding_labels.labels.models import GroundingData, SensitivityLabelResponse
from grounding_labels.service import SensitivityLabelService, build_service


class Labeler:
    """Zero-config labelling for the common case.

    Uses an in-memory store seeded with the five standard labels unless a
    configuration is supplied.

    Parameters
    ----------
    config:
        A loaded configuration, or a path to a YAML file.
    """

    def __init__(self, config: GroundingLabelsConfig | Path | str | None = None) -> None:
        if isinstance(config, (str, Path)):
            config = ConfigLoader().load(Path(config))
        self._service = build_service(config)

    def classify_text(self, text: str, source: str = "unknown") -> SensitivityLabelResponse:
        """Classify ``text`` and return the protected response."""
        data = GroundingData(id=str(uuid.uuid4()), content=text, source=source)
        return self._service.classify(data)

    @property
    def service(self) -> SensitivityLabelService:
        """The underlying :class:`SensitivityLabelService`."""
        return self._service

    def __repr__(self) -> str:
        return f"Labeler(labels={len(self._service.store.get_all())})"
