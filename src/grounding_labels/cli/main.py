"""CLI entry point for grounding-labels.

Invoked as::

    grounding-labels [OPTIONS] COMMAND [ARGS]...

or during development::

    python -m grounding_labels.cli.main

Commands
--------
- init            Write a default grounding-labels.yaml
- classify        Classify text or a file and show the protected response
- labels list     List the labels in the store
- labels add      Create a label
- labels delete   Delete a label
- labels import   Import labels from a JSON file
- labels export   Export labels to a JSON file
- validate        Validate every label, or one label by id
- decrypt         Decrypt content encrypted under a label
- keygen          Print a new base64 encryption key
- version         Show version information
"""
from __future__ import annotations

import functools
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Callable, TypeVar

import click
from rich.console import Console
from rich.panel import Panel

from grounding_labels.config.loader import ConfigLoader, GroundingLabelsConfig
from grounding_labels.errors import ErrorKind, LabelError

if TYPE_CHECKING:
    from grounding_labels.service import SensitivityLabelService

console = Console()
err_console = Console(stderr=True)

_DEFAULT_CONFIG = Path("grounding-labels.yaml")
_DEFAULT_STORE = Path("labels.json")
_FORMAT_CHOICE = click.Choice(["table", "json", "xml"])
_PRIORITY_CHOICE = click.Choice(
    ["Public", "Internal", "Confidential", "HighlyConfidential", "Restricted"],
    case_sensitive=False,
)

F = TypeVar("F", bound=Callable[..., object])


@dataclass
class CliState:
    """Options shared by every command."""

    config_path: Path
    store_path: Path | None

    def config(self) -> GroundingLabelsConfig:
        try:
            return ConfigLoader().load_or_defaults(self.config_path)
        except ValueError as exc:
            err_console.print(f"[red]Invalid configuration:[/red] {exc}")
            sys.exit(2)

    def build_service(self) -> "SensitivityLabelService":
        from grounding_labels.labels.store import JsonLabelStore
        from grounding_labels.service import build_service

        config = self.config()
        path = self.store_path or config.store.path or _DEFAULT_STORE
        store = JsonLabelStore(Path(path), seed_defaults=config.store.seed_defaults)
        return build_service(config, store=store)


# ---------------------------------------------------------------------------
# Error rendering
# ---------------------------------------------------------------------------


def render_label_error(error: LabelError) -> str:
    """Return a kind-specific, human-readable message for ``error``."""
    kind = error.kind
    if kind is ErrorKind.INVALID_LABEL:
        lines = [f"Label '{error.label_id}' is invalid:"]
        lines.extend(f"  - {message}" for message in error.errors or [error.message])
        return "\n".join(lines)
    if kind is ErrorKind.LABEL_NOT_FOUND:
        return f"Label '{error.label_id}' was not found."
    if kind is ErrorKind.ENCRYPTION_FAILURE:
        return f"Could not {error.operation or 'process'} content for label '{error.label_id}': {error.message}"
    if kind is ErrorKind.CLASSIFICATION_FAILURE:
        return f"Classification failed (label '{error.label_id}'): {error.message}"
    if kind is ErrorKind.DUPLICATE_LABEL:
        return f"Duplicate label '{error.label_id}': {error.message}"
    if kind is ErrorKind.STORAGE_FAILURE:
        return f"Label storage error: {error.message}"
    if kind is ErrorKind.OVERRIDE_REJECTED:
        return f"Reclassification rejected for label '{error.label_id}': {error.message}"
    if kind is ErrorKind.UNAUTHORIZED_ACCESS:
        return f"Access to label '{error.label_id}' denied for {error.user}: {error.message}"
    return str(error)


def handle_label_errors(func: F) -> F:
    """Render :class:`LabelError` on stderr and exit 1."""

    @functools.wraps(func)
    def wrapper(*args: object, **kwargs: object) -> object:
        try:
            return func(*args, **kwargs)
        except LabelError as exc:
            err_console.print(f"[red]Error:[/red] {render_label_error(exc)}", highlight=False)
            sys.exit(1)

    return wrapper  # type: ignore[return-value]


def _emit(text: str, output_file: str | None) -> None:
    if output_file:
        out_path = Path(output_file)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text, encoding="utf-8")
        console.print(f"[green]Wrote[/green] [bold]{out_path}[/bold]")
    else:
        click.echo(text)


def _read_input(text: str | None, file_path: str | None) -> str:
    if file_path:
        return Path(file_path).read_text(encoding="utf-8")
    if text:
        return text
    if not sys.stdin.isatty():
        piped = sys.stdin.read()
        if piped:
            return piped
    err_console.print("[red]Provide TEXT, --file, or pipe content on stdin.[/red]")
    sys.exit(2)


# ---------------------------------------------------------------------------
# Root command group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="grounding-labels")
@click.option(
    "--config",
    "-c",
    "config_path",
    default=str(_DEFAULT_CONFIG),
    show_default=True,
    type=click.Path(dir_okay=False),
    help="Path to grounding-labels.yaml.",
)
@click.option(
    "--store",
    "-s",
    "store_path",
    default=None,
    type=click.Path(dir_okay=False),
    help="Label store JSON file (overrides the config file).",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str, store_path: str | None, log_level: str) -> None:
    """Grounding Labels CLI: sensitivity labels for LLM grounding data."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = CliState(
        config_path=Path(config_path),
        store_path=Path(store_path) if store_path else None,
    )


# ---------------------------------------------------------------------------
# version / keygen / init
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from grounding_labels import __version__

    console.print(
        Panel(
            f"[bold]grounding-labels[/bold]  v[cyan]{__version__}[/cyan]\n"
            "Sensitivity labels for LLM grounding data and responses.",
            title="Version",
            border_style="blue",
        )
    )


@cli.command(name="keygen")
def keygen_command() -> None:
    """Print a new base64 AES-256 key for GROUNDING_LABELS_KEY."""
    from grounding_labels.protection.encryption import generate_key

    click.echo(generate_key())


@cli.command(name="init")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    default=str(_DEFAULT_CONFIG),
    show_default=True,
    help="Output configuration file path.",
)
@click.option("--force", is_flag=True, help="Overwrite an existing file.")
def init_command(output: str, force: bool) -> None:
    """Write a default configuration file."""
    output_path = Path(output)
    if output_path.exists() and not force:
        err_console.print(f"[yellow]{output_path} already exists; use --force to overwrite.[/yellow]")
        sys.exit(1)

    config = GroundingLabelsConfig.model_validate(
        {
            "store": {"path": str(_DEFAULT_STORE), "seed_defaults": True},
            "audit": {"log_path": "./labels_audit.jsonl"},
        }
    )
    ConfigLoader().dump(config, output_path)
    console.print(f"[green]Initialised[/green] configuration: [bold]{output_path}[/bold]")


# ---------------------------------------------------------------------------
# classify
# ---------------------------------------------------------------------------


@cli.command(name="classify")
@click.argument("text", required=False)
@click.option("--file", "-f", "file_path", type=click.Path(exists=True, dir_okay=False), help="Read content from a file.")
@click.option("--label", "-l", "label_id", default=None, help="Apply an existing label instead of classifying.")
@click.option("--source", default="cli", show_default=True, help="Source recorded for the content.")
@click.option("--data-type", default="text", show_default=True, help="Data type of the content.")
@click.option("--format", "output_format", type=_FORMAT_CHOICE, default="table", show_default=True)
@click.option("--output", "-o", "output_file", type=click.Path(dir_okay=False), help="Write the result to a file.")
@click.option("--verbose", "-v", is_flag=True, help="Include content in the output.")
@click.pass_obj
@handle_label_errors
def classify_command(
    state: CliState,
    text: str | None,
    file_path: str | None,
    label_id: str | None,
    source: str,
    data_type: str,
    output_format: str,
    output_file: str | None,
    verbose: bool,
) -> None:
    """Classify TEXT (or --file / stdin) and show the protected response."""
    from grounding_labels.labels.models import GroundingData
    from grounding_labels.output.renderer import ResultRenderer

    content = _read_input(text, file_path)
    service = state.build_service()

    label = None
    if label_id:
        label = service.store.get_by_id(label_id)
        if label is None:
            raise LabelError.not_found(label_id)

    data = GroundingData(
        id=Path(file_path).name if file_path else "cli-input",
        content=content,
        source=source,
        data_type=data_type,
        label=label,
    )
    response = service.classify(data)
    _emit(ResultRenderer().render_classification(response, output_format, verbose), output_file)


# ---------------------------------------------------------------------------
# labels group
# ---------------------------------------------------------------------------


@cli.group(name="labels")
def labels_group() -> None:
    """Label store commands."""


@labels_group.command(name="list")
@click.option("--format", "output_format", type=_FORMAT_CHOICE, default="table", show_default=True)
@click.option("--details", "-d", is_flag=True, help="Show allow-lists and timestamps.")
@click.option("--active-only", is_flag=True, help="Hide inactive labels.")
@click.option("--output", "-o", "output_file", type=click.Path(dir_okay=False), help="Write the list to a file.")
@click.pass_obj
@handle_label_errors
def labels_list_command(
    state: CliState,
    output_format: str,
    details: bool,
    active_only: bool,
    output_file: str | None,
) -> None:
    """List labels, lowest priority first."""
    from grounding_labels.output.renderer import ResultRenderer

    service = state.build_service()
    labels = sorted(service.store.get_all(), key=lambda label: (label.priority.rank, label.name))
    if active_only:
        labels = [label for label in labels if label.is_active]
    _emit(ResultRenderer().render_labels(labels, output_format, details), output_file)


@labels_group.command(name="add")
@click.option("--id", "label_id", required=True, help="Label id (lowercase letters, digits, hyphens).")
@click.option("--name", required=True, help="Display name.")
@click.option("--priority", type=_PRIORITY_CHOICE, required=True, help="Priority tier.")
@click.option("--description", default="", help="Description.")
@click.option("--encrypt", is_flag=True, help="Require encryption.")
@click.option("--prevent-extraction", is_flag=True, help="Prevent display and extraction.")
@click.option("--prevent-copy-paste", is_flag=True, help="Prevent copy/paste.")
@click.option("--prevent-grounding", is_flag=True, help="Prevent use as grounding data.")
@click.option("--allowed-user", "allowed_users", multiple=True, help="Allowed user (repeatable).")
@click.option("--allowed-group", "allowed_groups", multiple=True, help="Allowed group (repeatable).")
@click.pass_obj
@handle_label_errors
def labels_add_command(
    state: CliState,
    label_id: str,
    name: str,
    priority: str,
    description: str,
    encrypt: bool,
    prevent_extraction: bool,
    prevent_copy_paste: bool,
    prevent_grounding: bool,
    allowed_users: tuple[str, ...],
    allowed_groups: tuple[str, ...],
) -> None:
    """Create a label."""
    from grounding_labels.labels.models import Label, ProtectionSettings

    service = state.build_service()
    label = Label(
        id=label_id,
        name=name,
        description=description,
        priority=priority,
        protection=ProtectionSettings(
            require_encryption=encrypt,
            prevent_extraction=prevent_extraction,
            prevent_copy_paste=prevent_copy_paste,
            prevent_grounding=prevent_grounding,
            allowed_users=list(allowed_users),
            allowed_groups=list(allowed_groups),
        ),
    )
    result = service.validator.validate_detailed(label)
    if not result.is_valid:
        raise LabelError.invalid_label(label_id, result.errors)
    for warning in result.warnings:
        err_console.print(f"[yellow]Warning:[/yellow] {warning}")

    created = service.store.create(label)
    console.print(f"[green]Created[/green] label [bold]{created.id}[/bold] ({created.priority.display_name})")


@labels_group.command(name="delete")
@click.argument("label_id")
@click.pass_obj
@handle_label_errors
def labels_delete_command(state: CliState, label_id: str) -> None:
    """Delete the label LABEL_ID."""
    service = state.build_service()
    if not service.store.delete(label_id):
        raise LabelError.not_found(label_id)
    console.print(f"[green]Deleted[/green] label [bold]{label_id}[/bold]")


@labels_group.command(name="import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--overwrite", is_flag=True, help="Replace labels that already exist.")
@click.pass_obj
@handle_label_errors
def labels_import_command(state: CliState, path: str, overwrite: bool) -> None:
    """Import labels from the JSON file PATH."""
    service = state.build_service()
    count = service.store.import_labels(Path(path), overwrite=overwrite)
    console.print(f"[green]Imported[/green] {count} labels from [bold]{path}[/bold]")


@labels_group.command(name="export")
@click.argument("path", type=click.Path(dir_okay=False))
@click.pass_obj
@handle_label_errors
def labels_export_command(state: CliState, path: str) -> None:
    """Export all labels to the JSON file PATH."""
    service = state.build_service()
    count = service.store.export_labels(Path(path))
    console.print(f"[green]Exported[/green] {count} labels to [bold]{path}[/bold]")


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


@cli.command(name="validate")
@click.argument("label_id", required=False)
@click.option("--format", "output_format", type=_FORMAT_CHOICE, default="table", show_default=True)
@click.option("--output", "-o", "output_file", type=click.Path(dir_okay=False), help="Write results to a file.")
@click.pass_obj
@handle_label_errors
def validate_command(
    state: CliState,
    label_id: str | None,
    output_format: str,
    output_file: str | None,
) -> None:
    """Validate every label, or only LABEL_ID."""
    from grounding_labels.output.renderer import ResultRenderer

    service = state.build_service()
    if label_id:
        label = service.store.get_by_id(label_id)
        if label is None:
            raise LabelError.not_found(label_id)
        labels = [label]
    else:
        labels = service.store.get_all()

    results = [service.validator.validate_detailed(label) for label in labels]
    _emit(ResultRenderer().render_validation(results, output_format), output_file)
    if not all(result.is_valid for result in results):
        sys.exit(1)


# ---------------------------------------------------------------------------
# decrypt
# ---------------------------------------------------------------------------


@cli.command(name="decrypt")
@click.argument("text", required=False)
@click.option("--file", "-f", "file_path", type=click.Path(exists=True, dir_okay=False), help="Read content from a file.")
@click.option("--label", "-l", "label_id", required=True, help="Label the content was encrypted under.")
@click.pass_obj
@handle_label_errors
def decrypt_command(state: CliState, text: str | None, file_path: str | None, label_id: str) -> None:
    """Decrypt TEXT (or --file / stdin) encrypted under --label.

    Formatted responses are accepted; the label banner is stripped first.
    """
    from grounding_labels.protection.encryption import is_encrypted

    content = _read_input(text, file_path).strip()
    service = state.build_service()
    label = service.store.get_by_id(label_id)
    if label is None:
        raise LabelError.not_found(label_id)

    if not is_encrypted(content):
        content = service.formatter.strip_label_formatting(content)
    click.echo(service.encryptor.decrypt(content, label))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
