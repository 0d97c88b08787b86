"""
Enquiry importer package.

Registers the importer CLI groups and records importer state on
``app.extensions['importer']``.
"""

from __future__ import annotations

import click
from flask import Flask

from enquiry_app.utils.importer import is_importer_enabled

IMPORTER_EXTENSION_KEY = "importer"

__all__ = ["init_importer", "IMPORTER_EXTENSION_KEY"]


def get_disabled_importer_group() -> click.Group:
    """
    Return a minimal command group that informs the operator the importer is disabled.
    """

    @click.group(name="enquiries", invoke_without_command=True)
    def disabled_group():
        raise click.ClickException("Enquiry import commands are unavailable because IMPORTER_ENABLED=false.")

    return disabled_group


def _set_cli(app: Flask, enabled: bool) -> None:
    """Register the appropriate CLI groups based on flag state."""
    # Imported here: the CLI pulls in the service layer, which imports this package.
    from .cli import enquiries_cli, fields_cli

    for command_name in (enquiries_cli.name, fields_cli.name):
        app.cli.commands.pop(command_name, None)

    app.cli.add_command(fields_cli)
    if enabled:
        app.cli.add_command(enquiries_cli)
    else:
        app.cli.add_command(get_disabled_importer_group())


def init_importer(app: Flask) -> None:
    """
    Mount the importer CLI according to ``IMPORTER_ENABLED``.
    """
    enabled = is_importer_enabled(app)
    state = app.extensions.setdefault(IMPORTER_EXTENSION_KEY, {})
    state.update(
        {
            "enabled": enabled,
            "alias_path": app.config.get("IMPORTER_ALIAS_PATH"),
        }
    )
    _set_cli(app, enabled)
    if enabled:
        app.logger.info("Enquiry importer enabled")
    else:
        app.logger.info("Enquiry importer disabled via IMPORTER_ENABLED flag; import commands unavailable.")
