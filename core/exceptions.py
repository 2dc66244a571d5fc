"""
Custom exceptions for LeadFill
Provides structured error handling across all domains
"""
from typing import Any, Dict, Optional


class LeadFillError(Exception):
    """Base exception for all LeadFill errors"""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for invocation error payloads"""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(LeadFillError):
    """Raised when an invocation event is malformed"""

    def __init__(self, message: str, field: Optional[str] = None, **details):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details={"field": field, **details} if field else details,
        )


class NotFoundError(LeadFillError):
    """Raised when a resource is not found"""

    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            message=f"{resource} not found: {identifier}",
            error_code="NOT_FOUND",
            details={"resource": resource, "identifier": str(identifier)},
        )


class ExternalAPIError(LeadFillError):
    """Raised when an external API call fails"""

    def __init__(
        self,
        provider: str,
        message: str,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
        **details,
    ):
        super().__init__(
            message=f"{provider} API error: {message}",
            error_code="EXTERNAL_API_ERROR",
            details={
                "provider": provider,
                "api_status_code": status_code,
                "response_body": response_body,
                **details,
            },
        )
        self.provider = provider
        self.status_code = status_code


class StorageError(LeadFillError):
    """Raised when an object storage operation fails"""

    def __init__(self, message: str, operation: Optional[str] = None, **details):
        super().__init__(
            message=message,
            error_code="STORAGE_ERROR",
            details={"operation": operation, **details} if operation else details,
        )


class DecodeError(LeadFillError):
    """Raised when input rows or service payloads cannot be decoded"""

    def __init__(self, message: str, line: Optional[int] = None, **details):
        super().__init__(
            message=message,
            error_code="DECODE_ERROR",
            details={"line": line, **details} if line is not None else details,
        )
        self.line = line


class ConfigurationError(LeadFillError):
    """Raised when configuration is invalid or missing"""

    def __init__(self, message: str, setting: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details={"setting": setting} if setting else {},
        )


class RecursiveTriggerError(ConfigurationError):
    """Raised when output would land in the bucket that triggers the pipeline"""

    def __init__(self, bucket: str):
        super().__init__(
            message=f"Output bucket '{bucket}' is the trigger bucket; uploading would re-invoke the pipeline",
            setting="output_bucket",
        )
        self.bucket = bucket
