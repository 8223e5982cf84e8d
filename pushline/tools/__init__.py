"""
External process and port helpers used by goal actions.
"""

from pushline.tools.ports import PortAllocator
from pushline.tools.process import ProcessRunner

__all__ = ["PortAllocator", "ProcessRunner"]
