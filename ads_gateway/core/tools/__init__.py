"""
Tools
=====

Named operations exposed through ``POST /v1/tools``.
"""

from .dispatcher import ToolDispatcher, TOOL_NAMES

__all__ = ["ToolDispatcher", "TOOL_NAMES"]
