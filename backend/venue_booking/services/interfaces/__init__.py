"""
Service interfaces for dependency inversion.
Allows swapping implementations without changing business logic.
"""

from .storage import ImageStorage

__all__ = ['ImageStorage']
