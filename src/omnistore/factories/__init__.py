"""
Factories for building storage adapters.
"""

from .storage_factory import create_storage, resolve_provider

__all__ = ["create_storage", "resolve_provider"]
