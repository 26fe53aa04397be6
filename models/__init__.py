"""
Models Package

This file ensures the SQLAlchemy models are imported and registered
with Base.metadata before tables are created.
"""

from models.base import Base
from models.saved_cart import SavedCart

__all__ = [
    'Base',
    'SavedCart',
]
