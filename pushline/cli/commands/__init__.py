"""CLI commands package."""

from pushline.cli.commands import config, intents, push, rules

__all__ = ["config", "intents", "push", "rules"]
