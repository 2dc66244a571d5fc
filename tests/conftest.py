"""
Shared fixtures for all tests
"""
import pytest

from core.config import Settings
from tests.fixtures import FakePlacesClient, FakeS3Client


@pytest.fixture
def settings():
    """Settings independent of the host environment"""
    return Settings(
        _env_file=None,
        environment="test",
        input_bucket="leads-input",
        output_bucket="leads-output",
        google_places_api_key="test-api-key",
        log_format="text",
    )


@pytest.fixture
def acme_places():
    """Places client that resolves the Acme Bakery example row"""
    return FakePlacesClient(
        candidates={"Acme BakerySpringfieldON": ["place-acme"]},
        details={
            "place-acme": {
                "formatted_address": "1 Main St",
                "international_phone_number": "555-0100",
                "website": "acme.test",
            }
        },
    )


@pytest.fixture
def s3_client():
    return FakeS3Client()
