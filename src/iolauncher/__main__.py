"""Allow running as 'python -m iolauncher'."""

from .cli import cli

cli()
