"""
Core service layer.
"""

from .service import StorageService

__all__ = ["StorageService"]
