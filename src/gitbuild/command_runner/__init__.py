"""
External command runner.

This package handles:
1. Running shell strings and argv commands synchronously
2. Overlaying extra environment variables on the inherited environment
3. Capturing status and output without raising
"""

from .runner import CommandResult, CommandRunner, format_command

__all__ = ["CommandResult", "CommandRunner", "format_command"]
