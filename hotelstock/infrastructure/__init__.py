"""Infrastructure layer implementations."""

from hotelstock.infrastructure import storage

__all__ = ["storage"]
