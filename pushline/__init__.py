"""
Pushline - goal scheduling for continuous delivery

Matches incoming pushes against a table of rules, orders the resulting
goal sets by declared dependency, runs each goal's action and reports
the terminal state of every goal.
"""

__version__ = "0.1.0"
__author__ = "Pushline Team"
__license__ = "MIT"

from pushline.models.config import PushlineConfig

__all__ = [
    "__version__",
    "PushlineConfig",
]
