"""
Storage module for writing sync artifacts.

Provides the abstract storage interface and its local filesystem
implementation used for documents and images.
"""

from .base import BaseStorage
from .local import LocalStorage

__all__ = [
    "BaseStorage",
    "LocalStorage",
]
