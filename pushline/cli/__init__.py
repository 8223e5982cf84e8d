"""
CLI package for Pushline.

Provides a rich command-line interface using Typer.
"""

from pushline.cli.app import app, main

__all__ = ["app", "main"]
