"""Stable import path for the provider error taxonomy."""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import ProviderError
from .errors_parts.classification import classify_exception, classify_status

__all__ = ["ErrorCode", "ProviderError", "classify_exception", "classify_status"]
