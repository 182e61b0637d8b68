"""Detail cache for extracted class documentation."""

from .manager import CacheManager, DetailCache

__all__ = [
    "CacheManager",
    "DetailCache",
]
