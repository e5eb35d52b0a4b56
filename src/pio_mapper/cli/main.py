"""Main CLI entry point for the PIO resource mapper.

This module provides the main Click command group for the pio-mapper CLI.
"""

from pathlib import Path
from typing import Optional

import click

from pio_mapper import __version__
from pio_mapper.cli.convert_commands import convert
from pio_mapper.config import load_config
from pio_mapper.logging_audit import configure_logging, configure_operation_logging_from_config
from pio_mapper.utils.exceptions import ConfigurationError


@click.group()
@click.version_option(version=__version__, prog_name="pio-mapper")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: ./config/config.json)",
)
@click.option("--verbose", is_flag=True, help="Enable verbose logging (DEBUG level)")
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to log file (overrides config file)",
)
@click.option(
    "--redact-pii",
    is_flag=True,
    help="Redact PII (names, phone numbers, e-mail addresses) from logs",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: bool,
    log_file: Optional[Path],
    redact_pii: bool,
) -> None:
    """PIO resource mapper - converts hand-off document resources.

    Reads contact persons, practitioners, organizations and patient
    extensions out of a document tree, and writes edited objects back as
    tree fragments.

    Common usage:

        # List the practitioners of a document
        pio-mapper convert to-object document.json --kind practitioner

        # Write edited organizations back into a document
        pio-mapper convert to-tree orgs.json --kind organization --document document.json

        # Enable verbose logging for debugging
        pio-mapper --verbose convert to-object document.json --kind organization

    Use --help with any command for more information.
    """
    ctx.ensure_object(dict)

    try:
        config_obj = load_config(config)
        ctx.obj["config"] = config_obj
    except ConfigurationError as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        ctx.exit(1)

    ctx.obj["verbose"] = verbose
    ctx.obj["redact_pii"] = redact_pii
    ctx.obj["log_file"] = log_file

    # Precedence: CLI flags > config file > defaults
    log_level = "DEBUG" if verbose else config_obj.logging.level
    log_file_path = log_file if log_file else config_obj.logging.log_file
    redact_pii_setting = redact_pii if redact_pii else config_obj.logging.redact_pii

    configure_logging(level=log_level, log_file=log_file_path, redact_pii=redact_pii_setting)
    if not verbose:
        configure_operation_logging_from_config(config_obj.operation_logging)


cli.add_command(convert)


@cli.group()
def config() -> None:
    """Configuration management commands."""
    pass


@config.command()
@click.argument("config_file", type=click.Path(exists=True, path_type=Path))
def validate(config_file: Path) -> None:
    """Validate a configuration file.

    Example:
        pio-mapper config validate config/config.json
    """
    try:
        config_obj = load_config(config_file)

        click.echo(click.style("✓", fg="green", bold=True) + " Configuration is valid")
        click.echo(f"\nConfiguration file: {config_file}")
        click.echo("\nTerminology:")
        click.echo(f"  Value sets:  {config_obj.terminology.value_set_file or 'bundled'}")

        click.echo("\nBackend:")
        click.echo(f"  Enabled:     {config_obj.backend.enabled}")
        click.echo(f"  Base URL:    {config_obj.backend.base_url}")
        click.echo(
            f"  Timeouts:    {config_obj.backend.connect_timeout}s connect, "
            f"{config_obj.backend.read_timeout}s read"
        )
        click.echo(f"  Retries:     {config_obj.backend.max_retries}")
        click.echo(f"  Verify TLS:  {config_obj.backend.verify_tls}")

        click.echo("\nLogging:")
        click.echo(f"  Level:       {config_obj.logging.level}")
        click.echo(f"  Log file:    {config_obj.logging.log_file}")
        click.echo(f"  Redact PII:  {config_obj.logging.redact_pii}")

    except ConfigurationError as e:
        click.echo(click.style("✗", fg="red", bold=True) + " Configuration validation failed")
        click.echo(f"\n{e}", err=True)
        raise click.exceptions.Exit(1)


cli.add_command(config)


@cli.command()
def version() -> None:
    """Display version information."""
    click.echo(f"pio-mapper version {__version__}")


if __name__ == "__main__":
    cli()
