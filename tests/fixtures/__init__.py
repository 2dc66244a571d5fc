"""
Test Fixtures Package

Provides centralized fixtures and fakes:
- Settings and sample datasets
- Google Places mock responses and an in-memory places client
- An in-memory S3 client
"""

from .google_places_mock import FakePlacesClient, GooglePlacesMockFactory
from .storage import FakeS3Client, FakeStreamingBody

__all__ = [
    "FakePlacesClient",
    "FakeS3Client",
    "FakeStreamingBody",
    "GooglePlacesMockFactory",
]
