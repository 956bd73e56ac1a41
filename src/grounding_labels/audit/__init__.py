"""Audit trail of labelling decisions."""
from __future__ import annotations

from grounding_labels.audit.logger import ClassificationAuditLog

__all__ = ["ClassificationAuditLog"]
