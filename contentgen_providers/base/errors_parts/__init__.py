"""Error taxonomy parts. Import from ``contentgen_providers.base.errors``."""

from .error_code import ErrorCode
from .provider_error import ProviderError
from .classification import classify_exception, classify_status

__all__ = ["ErrorCode", "ProviderError", "classify_exception", "classify_status"]
