"""
Built-in exception types. Add new ones here or via exception_factory().

Taxonomy used by the orchestrator:
  AuthenticationError: no resolvable caller/tenant; short-circuits the turn.
  RetrievalError     : a context or real-time data collaborator failed.
  GenerationError    : inference backend unreachable or returned unusable output.
  DispatchError      : unresolved function name, or a handler raised.
"""
from __future__ import annotations

from truckmates_ai.core.exceptions.base import TruckMatesError


class ConfigurationError(TruckMatesError):
    """Invalid or missing configuration."""

    default_code = "CONFIGURATION_ERROR"
    default_http_status = 500


class ValidationError(TruckMatesError):
    """Request or input validation failed."""

    default_code = "VALIDATION_ERROR"
    default_http_status = 400


class AuthenticationError(TruckMatesError):
    """Caller could not be resolved to a user and tenant."""

    default_code = "NOT_AUTHENTICATED"
    default_http_status = 401


class ExternalServiceError(TruckMatesError):
    """External service (LLM, search API, retrieval backend) failed."""

    default_code = "EXTERNAL_SERVICE_ERROR"
    default_http_status = 502


class RetrievalError(ExternalServiceError):
    """Internal retrieval or real-time data fetch failed."""

    default_code = "RETRIEVAL_ERROR"


class GenerationError(ExternalServiceError):
    """Inference backend call failed or returned an unusable payload."""

    default_code = "GENERATION_ERROR"


class DispatchError(TruckMatesError):
    """A requested function call could not be executed."""

    default_code = "DISPATCH_ERROR"
    default_http_status = 500


class FunctionNotFoundError(DispatchError):
    """The model asked for a function the registry does not expose."""

    default_code = "FUNCTION_NOT_FOUND"
    default_http_status = 404
