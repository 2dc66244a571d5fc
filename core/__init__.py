"""Core utilities and configuration for LeadFill"""
from core.config import Settings, get_settings, load_settings
from core.exceptions import ConfigurationError, DecodeError, ExternalAPIError, LeadFillError, ValidationError
from core.logging import get_logger

__all__ = [
    "Settings",
    "get_settings",
    "load_settings",
    "get_logger",
    "LeadFillError",
    "ValidationError",
    "ExternalAPIError",
    "DecodeError",
    "ConfigurationError",
]
