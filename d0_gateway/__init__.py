"""
D0 Gateway - Unified facade for all external services

No other domain makes direct external calls - everything goes through this gateway.
"""

from .base import BaseAPIClient
from .providers import GooglePlacesClient
from .storage import S3ObjectStore, StorageLocation

__all__ = [
    "BaseAPIClient",
    "GooglePlacesClient",
    "S3ObjectStore",
    "StorageLocation",
]
