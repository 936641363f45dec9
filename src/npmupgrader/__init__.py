"""
npm-windows-upgrade - Upgrade npm on Windows
"""

__version__ = "1.0.0"

from .core import NpmUpgrader, UpgraderError

__all__ = ["NpmUpgrader", "UpgraderError"]
