"""
CLI commands for enquiry imports and field definition management.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional, Tuple

import click
from flask import current_app
from flask.cli import AppGroup

from enquiry_app.fields.exceptions import FieldSchemaError
from enquiry_app.importer.adapters import SpreadsheetReadError
from enquiry_app.importer.mapping import AliasConfigError
from enquiry_app.services.enquiry_import_service import EnquiryImportService
from enquiry_app.services.field_schema_service import FieldSchemaService
from enquiry_app.utils.importer import is_importer_enabled


@click.group(name="enquiries", cls=AppGroup)
def enquiries_cli():
    """Enquiry import commands."""


@enquiries_cli.command("import")
@click.argument("file_path", type=click.Path(path_type=Path, exists=True, dir_okay=False))
@click.option(
    "--privileged/--unprivileged",
    default=False,
    help="Auto-create field definitions for unmapped columns.",
)
@click.option("--natural-key-column", help="Header holding the enquiry number, tried before the built-in aliases.")
@click.option("--sheet", help="Worksheet name for .xlsx files (defaults to the first sheet).")
@click.option("--header-row", type=click.IntRange(min=1), help="1-based row holding the column headers.")
@click.option("--json", "as_json", is_flag=True, help="Emit the import result as JSON.")
def import_enquiries(
    file_path: Path,
    privileged: bool,
    natural_key_column: Optional[str],
    sheet: Optional[str],
    header_row: Optional[int],
    as_json: bool,
):
    """Import enquiries from a .csv or .xlsx file."""
    if not is_importer_enabled():
        raise click.ClickException("Importer is disabled; enable it via IMPORTER_ENABLED before running.")

    try:
        result = EnquiryImportService.import_file(
            file_path,
            privileged=privileged,
            natural_key_column=natural_key_column,
            sheet=sheet,
            header_row=header_row,
        )
    except (SpreadsheetReadError, AliasConfigError) as exc:
        raise click.ClickException(str(exc)) from exc

    if as_json:
        click.echo(json.dumps(result.as_dict(), indent=2))
        return

    click.echo(
        f"Processed {result.total} rows: {result.created} created, {result.updated} updated, "
        f"{result.failed} failed, {result.skipped} skipped."
    )
    for error in result.errors:
        click.echo(f"  Row {error.row}: {error.message}")


@click.group(name="fields", cls=AppGroup)
def fields_cli():
    """Dynamic field definition commands."""


@fields_cli.command("list")
@click.option("--all", "include_inactive", is_flag=True, help="Include inactive fields.")
@click.option("--json", "as_json", is_flag=True, help="Emit definitions as JSON.")
def list_fields(include_inactive: bool, as_json: bool):
    """List field definitions."""
    definitions = FieldSchemaService.list_fields(include_inactive=include_inactive)
    if as_json:
        click.echo(json.dumps([definition.to_dict() for definition in definitions], indent=2))
        return
    if not definitions:
        click.echo("No field definitions.")
        return
    for definition in definitions:
        flags = []
        if definition.is_required:
            flags.append("required")
        if not definition.is_active:
            flags.append("inactive")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        options = f" options={','.join(definition.option_values)}" if definition.option_values else ""
        click.echo(f"{definition.name} ({definition.field_type.value}) {definition.label}{options}{suffix}")


@fields_cli.command("create")
@click.argument("name")
@click.argument("label")
@click.option("--type", "field_type", default="text", show_default=True, help="text, number, date, boolean or select.")
@click.option("--option", "options", multiple=True, help="Allowed value for select fields (repeatable).")
@click.option("--required", is_flag=True, help="Mark the field as required.")
@click.option("--description", help="Free-text description.")
def create_field(
    name: str,
    label: str,
    field_type: str,
    options: Tuple[str, ...],
    required: bool,
    description: Optional[str],
):
    """Create a field definition."""
    try:
        definition = FieldSchemaService.create_field(
            name,
            label,
            field_type=field_type,
            options=list(options),
            required=required,
            description=description,
        )
    except FieldSchemaError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Created field '{definition.name}' ({definition.field_type.value}).")


@fields_cli.command("update")
@click.argument("name")
@click.option("--label", help="New display label.")
@click.option("--type", "field_type", help="New type; existing values are checked first.")
@click.option("--option", "options", multiple=True, help="Replacement select options (repeatable).")
@click.option("--required/--optional", default=None, help="Toggle the required flag.")
@click.option("--active/--inactive", default=None, help="Toggle visibility.")
@click.option("--description", help="New description.")
def update_field(
    name: str,
    label: Optional[str],
    field_type: Optional[str],
    options: Tuple[str, ...],
    required: Optional[bool],
    active: Optional[bool],
    description: Optional[str],
):
    """Update a field definition."""
    changes = {}
    if label is not None:
        changes["label"] = label
    if field_type is not None:
        changes["type"] = field_type
    if options:
        changes["options"] = list(options)
    if required is not None:
        changes["required"] = required
    if active is not None:
        changes["active"] = active
    if description is not None:
        changes["description"] = description
    if not changes:
        raise click.UsageError("Nothing to update; pass at least one option.")

    try:
        definition = FieldSchemaService.update_field(name, **changes)
    except FieldSchemaError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Updated field '{definition.name}'.")


@fields_cli.command("delete")
@click.argument("name")
@click.option("--force", is_flag=True, help="Delete even if enquiries hold values, without prompting.")
def delete_field(name: str, force: bool):
    """Delete a field definition, confirming first when enquiries hold values."""
    try:
        outcome = FieldSchemaService.delete_field(name, force=force)
        if outcome.requires_force:
            click.confirm(
                f"Field '{name}' is used in {outcome.affected_count} enquiries. "
                "Deleting it will remove data from those records. Continue?",
                abort=True,
            )
            outcome = FieldSchemaService.delete_field(name, force=True)
    except FieldSchemaError as exc:
        raise click.ClickException(str(exc)) from exc

    current_app.logger.info("Field '%s' deleted from CLI (%s enquiries affected)", name, outcome.affected_count)
    click.echo(f"Deleted field '{name}' ({outcome.affected_count} enquiries affected).")
