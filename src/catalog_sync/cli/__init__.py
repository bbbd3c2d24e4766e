"""
CLI module for the catalog sync system.

This module provides CLI functionality beyond the main sync entry point.
"""

from .generate_cli import main as generate_main

__all__ = [
    "generate_main",
]
