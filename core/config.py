"""
Configuration management using Pydantic Settings
Handles environment variables and validation
"""
from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, ConfigDict, Field, SecretStr, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings

from core.exceptions import ConfigurationError

FAILURE_POLICIES = ("abort", "collect")


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Environment
    environment: str = Field(default="development")
    app_name: str = "LeadFill"
    app_version: str = "0.1.0"

    # Storage
    input_bucket: Optional[str] = Field(default=None, description="Bucket whose uploads trigger the pipeline")
    output_bucket: str = Field(
        validation_alias=AliasChoices("output_bucket", "output_container"),
        description="Destination for enriched output",
    )
    output_key_prefix: str = Field(default="output-")
    aws_region: Optional[str] = Field(default=None)

    # Google Places
    google_places_api_key: SecretStr = Field(
        validation_alias=AliasChoices("google_places_api_key", "external_api_key"),
    )
    google_places_base_url: str = Field(default="https://maps.googleapis.com/maps/api/place")
    request_timeout: float = Field(default=30.0, gt=0)

    # Enrichment
    max_concurrent_lookups: int = Field(default=1000, ge=1)
    failure_policy: str = Field(default="abort", description="abort: first lookup error fails the run")
    query_separator: str = Field(default="")

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")  # json or text

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        allowed = ["development", "test", "staging", "production"]
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("failure_policy")
    @classmethod
    def validate_failure_policy(cls, v):
        v = v.lower()
        if v not in FAILURE_POLICIES:
            raise ValueError(f"Failure policy must be one of: {list(FAILURE_POLICIES)}")
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        if v not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v

    @field_validator("output_bucket", "output_key_prefix")
    @classmethod
    def validate_not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v

    @field_validator("google_places_api_key")
    @classmethod
    def validate_api_key(cls, v):
        if not v.get_secret_value().strip():
            raise ValueError("Google Places API key must not be empty")
        return v

    @model_validator(mode="after")
    def validate_buckets(self):
        """The output bucket must never be the bucket that triggers the pipeline"""
        if self.input_bucket and self.input_bucket == self.output_bucket:
            raise ValueError(
                f"output_bucket must differ from input_bucket ('{self.input_bucket}'); "
                "writing to the trigger bucket re-invokes the pipeline"
            )
        return self

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def aborts_on_error(self) -> bool:
        return self.failure_policy == "abort"

    def get_api_key(self) -> str:
        """Get the Google Places API key"""
        return self.google_places_api_key.get_secret_value()

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    def model_dump(self, **kwargs):
        """Override to mask sensitive fields when serializing"""
        data = super().model_dump(**kwargs)

        for field in ["google_places_api_key"]:
            if field in data and data[field]:
                if hasattr(data[field], "get_secret_value"):
                    value = data[field].get_secret_value()
                else:
                    value = str(data[field])

                # Keep first 4 chars for identification
                if len(value) > 4:
                    data[field] = value[:4] + "*" * (len(value) - 4)
                else:
                    data[field] = "*" * len(value)

        return data


def load_settings(**overrides) -> Settings:
    """
    Build settings from the environment, failing with ConfigurationError

    Args:
        **overrides: Explicit values taking precedence over the environment

    Raises:
        ConfigurationError: When a required setting is missing or invalid
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        errors = e.errors()
        setting = ".".join(str(part) for part in errors[0]["loc"]) if errors and errors[0]["loc"] else None
        messages = "; ".join(err["msg"] for err in errors)
        raise ConfigurationError(f"Invalid configuration: {messages}", setting=setting) from e


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return load_settings()
