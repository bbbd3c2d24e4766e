"""
Fixture generation for the catalog sync system.
"""

from .generator import CatalogGenerator, ProductEvent

__all__ = ["CatalogGenerator", "ProductEvent"]
