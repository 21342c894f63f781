"""
Project exception system.

Usage:
    from truckmates_ai.core.exceptions import GenerationError, exception_factory

    # Built-in types
    raise GenerationError("Ollama returned 503", details={"model": "llama3.1:8b"})

    # Add new type on demand
    TelematicsError = exception_factory("TelematicsError", code="TELEMATICS_ERROR", http_status=502)
    raise TelematicsError("ELD feed unreachable", cause=original_error)
"""
from truckmates_ai.core.exceptions.base import TruckMatesError, exception_factory
from truckmates_ai.core.exceptions.errors import (
    AuthenticationError,
    ConfigurationError,
    DispatchError,
    ExternalServiceError,
    FunctionNotFoundError,
    GenerationError,
    RetrievalError,
    ValidationError,
)

__all__ = [
    "TruckMatesError",
    "exception_factory",
    "AuthenticationError",
    "ConfigurationError",
    "ValidationError",
    "ExternalServiceError",
    "RetrievalError",
    "GenerationError",
    "DispatchError",
    "FunctionNotFoundError",
]
