"""Geodesy provider for WGS84 input."""

from .bng_projection import BngProjection

__all__ = ['BngProjection']
