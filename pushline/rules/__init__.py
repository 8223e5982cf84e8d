"""
Rule tables.

Push rules defined in YAML, with built-in tables under ``builtin/``.
"""

from pushline.rules.loader import RuleDefinition, RuleFile, RuleLoader

__all__ = ["RuleDefinition", "RuleFile", "RuleLoader"]
