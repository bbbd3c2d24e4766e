"""
Configuration module for the catalog sync system.
"""

from .loader import ConfigLoader
from .models import CatalogSyncConfig

__all__ = ["ConfigLoader", "CatalogSyncConfig"]
