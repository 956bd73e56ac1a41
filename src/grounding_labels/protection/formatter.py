"""Visual label formatting for response content.

Wraps content in a header naming the label, an optional copy/paste
warning, and a footer listing the active protections::

    ████████████████████████████████████████
    🔒 CONFIDENTIAL - Sensitive information requiring protection
    ████████████████████████████████████████

    <content>

    ⚠️ This content contains sensitive information. Please handle appropriately.

    ═══════════════════════════════════════
    Classification: Confidential | Priority: Confidential
    🔒 Encryption Required
    📋 Copy/Paste Restricted
    ═══════════════════════════════════════
"""
from __future__ import annotations

from grounding_labels.labels.models import Label
from grounding_labels.labels.priority import PriorityTier

TAG_PREFIX = "[SENSITIVITY: "
TAG_SUFFIX = "]"
COPY_PASTE_WARNING = "⚠️ This content contains sensitive information. Please handle appropriately."
FOOTER_BORDER = "═" * 39

_BORDERS: dict[PriorityTier, str] = {
    PriorityTier.PUBLIC: "═" * 39,
    PriorityTier.INTERNAL: "▓" * 39,
    PriorityTier.CONFIDENTIAL: "█" * 40,
    PriorityTier.HIGHLY_CONFIDENTIAL: "■" * 40,
    PriorityTier.RESTRICTED: "🔴" * 20,
}

_ICONS: dict[PriorityTier, str] = {
    PriorityTier.PUBLIC: "🌍",
    PriorityTier.INTERNAL: "🏢",
    PriorityTier.CONFIDENTIAL: "🔒",
    PriorityTier.HIGHLY_CONFIDENTIAL: "🔐",
    PriorityTier.RESTRICTED: "🚫",
}

_BORDER_MARKERS = ("═══", "▓▓▓", "███", "■■■", "🔴")


class LabelFormatter:
    """Adds and removes visual sensitivity indicators."""

    def format_with_label(self, content: str, label: Label | None) -> str:
        if not content or label is None:
            return content

        lines: list[str] = [*self._header(label), "", content]
        if label.settings.prevent_copy_paste:
            lines.extend(["", COPY_PASTE_WARNING])
        lines.extend(["", *self._footer(label)])
        return "\n".join(lines) + "\n"

    def create_label_tag(self, label: Label | None) -> str:
        """Return an inline tag such as ``[SENSITIVITY: RESTRICTED]``."""
        if label is None:
            return ""
        return f"{TAG_PREFIX}{label.name.upper()}{TAG_SUFFIX}"

    def strip_label_formatting(self, formatted: str) -> str:
        """Recover the original content from :meth:`format_with_label` output.

        Text without a label header is returned with surrounding whitespace
        removed.
        """
        if not formatted:
            return formatted

        lines = formatted.rstrip("\n").split("\n")
        if not self._has_header(lines):
            return formatted.strip()

        body = lines[3:]
        # The footer is delimited by the last two footer borders.
        borders = [index for index, line in enumerate(body) if line == FOOTER_BORDER]
        if len(borders) >= 2:
            body = body[: borders[-2]]
        text = "\n".join(body).strip()
        if text.endswith(COPY_PASTE_WARNING):
            text = text[: -len(COPY_PASTE_WARNING)].rstrip()
        return text

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _has_header(lines: list[str]) -> bool:
        if len(lines) < 3 or lines[0] != lines[2]:
            return False
        return any(lines[0].startswith(marker) for marker in _BORDER_MARKERS)

    @staticmethod
    def _header(label: Label) -> list[str]:
        border = _BORDERS.get(label.priority, FOOTER_BORDER)
        icon = _ICONS.get(label.priority, "ℹ️")
        title = f"{icon} {label.name.upper()}"
        if label.description:
            title = f"{title} - {label.description}"
        return [border, title, border]

    @staticmethod
    def _footer(label: Label) -> list[str]:
        protection = label.settings
        lines = [
            FOOTER_BORDER,
            f"Classification: {label.name} | Priority: {label.priority.display_name}",
        ]
        if protection.require_encryption:
            lines.append("🔒 Encryption Required")
        if protection.prevent_extraction:
            lines.append("🚫 Extraction Prohibited")
        if protection.prevent_copy_paste:
            lines.append("📋 Copy/Paste Restricted")
        lines.append(FOOTER_BORDER)
        return lines
