"""
Database models package
"""

from .version import Version

__all__ = ["Version"]
