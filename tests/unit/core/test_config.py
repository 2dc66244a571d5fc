"""
Tests for configuration loading and validation
"""

import pytest
from pydantic import ValidationError

from core.config import Settings, get_settings, load_settings
from core.exceptions import ConfigurationError

ENV_VARS = [
    "ENVIRONMENT",
    "INPUT_BUCKET",
    "OUTPUT_BUCKET",
    "OUTPUT_CONTAINER",
    "GOOGLE_PLACES_API_KEY",
    "EXTERNAL_API_KEY",
    "FAILURE_POLICY",
    "MAX_CONCURRENT_LOOKUPS",
    "QUERY_SEPARATOR",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Isolate each test from the host environment and the settings cache"""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettingsFromEnvironment:
    """Test environment variable configuration"""

    def test_reads_required_settings(self, monkeypatch):
        monkeypatch.setenv("OUTPUT_BUCKET", "leads-output")
        monkeypatch.setenv("GOOGLE_PLACES_API_KEY", "secret-key")

        settings = Settings(_env_file=None)

        assert settings.output_bucket == "leads-output"
        assert settings.get_api_key() == "secret-key"
        assert settings.input_bucket is None

    def test_defaults_match_reference_behaviour(self, monkeypatch):
        monkeypatch.setenv("OUTPUT_BUCKET", "leads-output")
        monkeypatch.setenv("GOOGLE_PLACES_API_KEY", "secret-key")

        settings = Settings(_env_file=None)

        assert settings.failure_policy == "abort"
        assert settings.aborts_on_error is True
        assert settings.query_separator == ""
        assert settings.output_key_prefix == "output-"
        assert settings.max_concurrent_lookups == 1000

    def test_generic_aliases(self, monkeypatch):
        """OUTPUT_CONTAINER and EXTERNAL_API_KEY are accepted as aliases"""
        monkeypatch.setenv("OUTPUT_CONTAINER", "aliased-output")
        monkeypatch.setenv("EXTERNAL_API_KEY", "aliased-key")

        settings = Settings(_env_file=None)

        assert settings.output_bucket == "aliased-output"
        assert settings.get_api_key() == "aliased-key"

    def test_failure_policy_is_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("FAILURE_POLICY", "COLLECT")

        settings = Settings(_env_file=None, output_bucket="out", google_places_api_key="key")

        assert settings.failure_policy == "collect"
        assert settings.aborts_on_error is False


class TestSettingsValidation:
    """Test rejection of invalid configuration"""

    def test_missing_api_key_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, output_bucket="leads-output")

    def test_blank_api_key_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, output_bucket="leads-output", google_places_api_key="  ")

    def test_missing_output_bucket_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, google_places_api_key="key")

    def test_equal_buckets_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            Settings(
                _env_file=None,
                input_bucket="leads",
                output_bucket="leads",
                google_places_api_key="key",
            )

        assert "output_bucket must differ from input_bucket" in str(exc_info.value)

    def test_unknown_failure_policy_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, output_bucket="out", google_places_api_key="key", failure_policy="retry")

    def test_zero_concurrency_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, output_bucket="out", google_places_api_key="key", max_concurrent_lookups=0)

    def test_empty_output_prefix_rejected(self):
        """An empty prefix would write output over the input key name"""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, output_bucket="out", google_places_api_key="key", output_key_prefix="")

    def test_invalid_environment_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, output_bucket="out", google_places_api_key="key", environment="qa")


class TestLoadSettings:
    """Test the ConfigurationError boundary"""

    def test_load_settings_wraps_validation_errors(self):
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings(_env_file=None, google_places_api_key="key")

        assert exc_info.value.error_code == "CONFIGURATION_ERROR"
        assert "Invalid configuration" in exc_info.value.message

    def test_load_settings_success(self):
        settings = load_settings(_env_file=None, output_bucket="out", google_places_api_key="key")
        assert settings.output_bucket == "out"

    def test_get_settings_is_cached(self, monkeypatch):
        monkeypatch.setenv("OUTPUT_BUCKET", "cached-output")
        monkeypatch.setenv("GOOGLE_PLACES_API_KEY", "key")

        assert get_settings() is get_settings()


class TestSecretMasking:
    def test_model_dump_masks_api_key(self, settings):
        data = settings.model_dump()

        assert data["google_places_api_key"] == "test********"
        assert "test-api-key" not in str(data)
