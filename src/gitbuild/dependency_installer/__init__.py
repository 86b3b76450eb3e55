"""
Dependency installer.

This package handles:
1. Walking manifest dependency edges depth first
2. Pinning wildcard edges to resolved commit hashes
3. Running install scripts after each dependency's subtree is in place
4. Reporting what happened to every dependency
"""

from .installer import DependencyInstaller
from .report import DependencyState, InstallReport, InstallStatus

__all__ = [
    "DependencyInstaller",
    "DependencyState",
    "InstallReport",
    "InstallStatus",
]
