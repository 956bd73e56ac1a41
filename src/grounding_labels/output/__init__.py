"""Rendering of results for terminals and files."""
from __future__ import annotations

from grounding_labels.output.renderer import FORMATS, ResultRenderer

__all__ = ["FORMATS", "ResultRenderer"]
