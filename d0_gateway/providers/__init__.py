"""
Provider-specific API clients for D0 Gateway
"""

from .google_places import GooglePlacesClient

__all__ = [
    "GooglePlacesClient",
]
