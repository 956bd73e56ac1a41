"""Result renderer for the CLI and file exports.

Renders already-computed classification responses, label lists and
validation results in three formats:

- ``table``: Rich tables and panels rendered to plain text
- ``json``:  indented JSON (camelCase label records)
- ``xml``:   an ElementTree document

Example
-------
>>> renderer = ResultRenderer()
>>> print(renderer.render_labels(store.get_all(), "json"))
"""
from __future__ import annotations

import io
import json
import xml.etree.ElementTree as ET
from typing import Iterable

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from grounding_labels.labels.models import Label, SensitivityLabelResponse
from grounding_labels.labels.validator import ValidationResult

FORMATS: tuple[str, ...] = ("table", "json", "xml")
PREVIEW_LENGTH = 200
_RENDER_WIDTH = 110


class ResultRenderer:
    """Renders results as table, JSON or XML text.

    Parameters
    ----------
    width:
        Console width used for table output.
    """

    def __init__(self, width: int = _RENDER_WIDTH) -> None:
        self._width = width

    # ------------------------------------------------------------------
    # Classification responses
    # ------------------------------------------------------------------

    def render_classification(
        self,
        response: SensitivityLabelResponse,
        output_format: str = "table",
        verbose: bool = False,
    ) -> str:
        fmt = _check_format(output_format)
        if fmt == "json":
            return json.dumps(_response_payload(response, verbose), indent=2, default=str)
        if fmt == "xml":
            return _to_xml(_response_element(response, verbose))

        console, buffer = self._console()
        label = response.label
        grid = Table.grid(padding=(0, 2))
        grid.add_column(style="bold")
        grid.add_column()
        grid.add_row("Label", f"{label.name} ({label.id})")
        grid.add_row("Priority", label.priority.display_name)
        grid.add_row("Description", label.description)
        grid.add_row("Protection", label.settings.describe())
        if "confidence" in response.metadata:
            grid.add_row("Confidence", f"{float(response.metadata['confidence']):.2f}")
        patterns = response.metadata.get("detected_patterns")
        if patterns:
            grid.add_row("Detected", ", ".join(str(p) for p in patterns))
        console.print(Panel(grid, title="Classification Result", border_style="cyan"))

        flags = Table(title="Response Settings", box=box.SIMPLE)
        flags.add_column("Setting", style="cyan")
        flags.add_column("Value", style="bold")
        flags.add_row("Should Display", _yes_no(response.should_display))
        flags.add_row("Allow Copy/Paste", _yes_no(response.allow_copy_paste))
        flags.add_row("Allow Grounding", _yes_no(response.allow_grounding))
        flags.add_row("Requires Encryption", _yes_no(response.requires_encryption))
        console.print(flags)

        if response.warning_message:
            console.print(f"Warning: {response.warning_message}")
        if verbose and response.content:
            console.print("Content Preview:")
            console.print(_preview(response.content), markup=False)
        return buffer.getvalue()

    # ------------------------------------------------------------------
    # Label lists
    # ------------------------------------------------------------------

    def render_labels(
        self,
        labels: Iterable[Label],
        output_format: str = "table",
        details: bool = False,
    ) -> str:
        fmt = _check_format(output_format)
        label_list = list(labels)
        if fmt == "json":
            return json.dumps([label.to_record() for label in label_list], indent=2)
        if fmt == "xml":
            root = ET.Element("labels", count=str(len(label_list)))
            for label in label_list:
                root.append(_label_element(label, details))
            return _to_xml(root)

        console, buffer = self._console()
        if not label_list:
            console.print("No labels found.")
            return buffer.getvalue()

        table = Table(title="Sensitivity Labels", box=box.SIMPLE)
        table.add_column("ID", style="cyan")
        table.add_column("Name", style="bold")
        table.add_column("Priority", style="magenta")
        table.add_column("Active")
        table.add_column("Protection")
        if details:
            table.add_column("Allowed")
            table.add_column("Updated", style="dim", no_wrap=True)
        for label in label_list:
            row = [
                label.id,
                label.name,
                label.priority.display_name,
                _yes_no(label.is_active),
                label.settings.describe(),
            ]
            if details:
                allowed = [*label.settings.allowed_users, *label.settings.allowed_groups]
                row.append(", ".join(allowed) or "everyone")
                row.append(label.updated_at.strftime("%Y-%m-%d %H:%M:%S"))
            table.add_row(*row)
        console.print(table)
        return buffer.getvalue()

    # ------------------------------------------------------------------
    # Validation results
    # ------------------------------------------------------------------

    def render_validation(
        self,
        results: Iterable[ValidationResult],
        output_format: str = "table",
    ) -> str:
        fmt = _check_format(output_format)
        result_list = list(results)
        if fmt == "json":
            return json.dumps([r.to_dict() for r in result_list], indent=2)
        if fmt == "xml":
            root = ET.Element("validation", count=str(len(result_list)))
            for result in result_list:
                node = ET.SubElement(
                    root,
                    "result",
                    labelId=result.label_id or "",
                    isValid=_xml_bool(result.is_valid),
                )
                for error in result.errors:
                    ET.SubElement(node, "error").text = error
                for warning in result.warnings:
                    ET.SubElement(node, "warning").text = warning
            return _to_xml(root)

        console, buffer = self._console()
        table = Table(title="Validation Results", box=box.SIMPLE)
        table.add_column("Label", style="cyan")
        table.add_column("Status", style="bold")
        table.add_column("Messages")
        for result in result_list:
            status = "Valid" if result.is_valid else "Invalid"
            messages = [*result.errors, *(f"warning: {w}" for w in result.warnings)]
            table.add_row(result.label_id or "?", status, "\n".join(messages))
        console.print(table)
        valid = sum(1 for r in result_list if r.is_valid)
        console.print(f"{valid}/{len(result_list)} labels valid")
        return buffer.getvalue()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _console(self) -> tuple[Console, io.StringIO]:
        buffer = io.StringIO()
        return Console(file=buffer, highlight=False, width=self._width), buffer


def _check_format(output_format: str) -> str:
    fmt = output_format.lower()
    if fmt not in FORMATS:
        raise ValueError(f"Unknown output format '{output_format}'. Valid: {', '.join(FORMATS)}")
    return fmt


def _yes_no(value: bool) -> str:
    return "yes" if value else "no"


def _xml_bool(value: bool) -> str:
    return "true" if value else "false"


def _preview(content: str) -> str:
    return content if len(content) <= PREVIEW_LENGTH else content[:PREVIEW_LENGTH] + "..."


def _response_payload(response: SensitivityLabelResponse, verbose: bool) -> dict[str, object]:
    payload = response.model_dump(mode="json", by_alias=True)
    if not verbose:
        payload.pop("content", None)
        payload.pop("formattedResponse", None)
    return payload


def _label_element(label: Label, details: bool) -> ET.Element:
    node = ET.Element(
        "label",
        id=label.id,
        priority=label.priority.value,
        isActive=_xml_bool(label.is_active),
    )
    ET.SubElement(node, "name").text = label.name
    ET.SubElement(node, "description").text = label.description
    protection = label.settings
    ET.SubElement(
        node,
        "protection",
        requireEncryption=_xml_bool(protection.require_encryption),
        preventExtraction=_xml_bool(protection.prevent_extraction),
        preventCopyPaste=_xml_bool(protection.prevent_copy_paste),
        preventGrounding=_xml_bool(protection.prevent_grounding),
    )
    if details:
        for key, value in label.custom_properties.items():
            ET.SubElement(node, "property", name=key).text = value
        ET.SubElement(node, "createdAt").text = label.created_at.isoformat()
        ET.SubElement(node, "updatedAt").text = label.updated_at.isoformat()
    return node


def _response_element(response: SensitivityLabelResponse, verbose: bool) -> ET.Element:
    root = ET.Element("classification", generatedAt=response.generated_at.isoformat())
    root.append(_label_element(response.label, details=False))
    ET.SubElement(
        root,
        "response",
        shouldDisplay=_xml_bool(response.should_display),
        allowCopyPaste=_xml_bool(response.allow_copy_paste),
        allowGrounding=_xml_bool(response.allow_grounding),
        requiresEncryption=_xml_bool(response.requires_encryption),
    )
    if response.warning_message:
        ET.SubElement(root, "warning").text = response.warning_message
    if verbose:
        ET.SubElement(root, "content").text = response.content
        ET.SubElement(root, "formattedResponse").text = response.formatted_response
    return root


def _to_xml(root: ET.Element) -> str:
    ET.indent(root)
    return ET.tostring(root, encoding="unicode", xml_declaration=True)
