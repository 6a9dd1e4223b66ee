"""Models package for shoplist."""
from .base import Base
from .item import StoredItem

__all__ = ['Base', 'StoredItem']
