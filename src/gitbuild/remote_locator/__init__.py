"""
Remote locator.

This package handles:
1. Expanding owner/repo shorthand to a full remote URL
2. Deriving the vendor directory of a dependency from its remote
"""

from .locator import RemoteLocation, RemoteLocator

__all__ = ["RemoteLocation", "RemoteLocator"]
