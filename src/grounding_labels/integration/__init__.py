"""Agent pipeline helpers for grounding data and LLM responses."""
from __future__ import annotations

from grounding_labels.integration.grounding_processor import GroundingDataProcessor
from grounding_labels.integration.response_processor import LLMResponseProcessor

__all__ = ["GroundingDataProcessor", "LLMResponseProcessor"]
