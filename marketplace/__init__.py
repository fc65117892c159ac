"""Marketplace core: access control and currency services for a multi-vendor store."""

__version__ = "1.0.0"
