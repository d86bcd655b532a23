"""
Futuna command-line interface.
"""

from futuna.cli.main import cli, main

__all__ = ["cli", "main"]
