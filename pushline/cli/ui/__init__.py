"""
UI components for Pushline CLI.
"""

from pushline.cli.ui.console import console, format_state, format_status
from pushline.cli.ui.panels import (
    ConsoleNotifier,
    create_push_panel,
    create_resolution_table,
    create_result_table,
    create_rules_table,
)

__all__ = [
    "console",
    "format_state",
    "format_status",
    "ConsoleNotifier",
    "create_push_panel",
    "create_resolution_table",
    "create_result_table",
    "create_rules_table",
]
