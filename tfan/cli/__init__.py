"""TFAN command-line interface package.

Supports ``python -m tfan.cli`` as an alternative to the ``tfan`` entry point.
"""

from tfan.cli.main import cli, main

__all__ = ["cli", "main"]
