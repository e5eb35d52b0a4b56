"""Entry point for running pio_mapper as a module.

This allows the package to be executed as:
    python -m pio_mapper
"""

from pio_mapper.cli.main import cli

if __name__ == "__main__":
    cli()
