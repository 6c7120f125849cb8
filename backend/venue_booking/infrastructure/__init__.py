"""
Infrastructure layer - external system integrations.
Keeps business logic clean from implementation details.
"""

from .local_storage import LocalImageStorage

__all__ = ['LocalImageStorage']
