"""Base classes for grid systems."""

from .grid import BaseGrid

__all__ = ['BaseGrid']
