"""
Catalog Sync: snapshot reconciliation for product catalogs.

Reconciles a persistent product store against a full-state catalog snapshot
with batched upserts and cursor-paginated deletion.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
