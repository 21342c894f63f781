"""
Root of the TruckMates AI exception tree.

Each error knows its machine-readable ``code`` and the HTTP status the API
should answer with, so routers translate failures by type. New kinds can be
declared as subclasses or minted at runtime with ``exception_factory``.
"""
from __future__ import annotations

import traceback
from typing import Any, Dict, Optional, Type


class TruckMatesError(Exception):
    """
    Base class for every error raised inside the package.

    ``details`` carries structured context (function name, provider, upstream
    body excerpt); ``cause`` keeps the lower-level exception that triggered it.
    """

    default_code: str = "TRUCKMATES_ERROR"
    default_http_status: int = 500

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        http_status: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or type(self).default_code
        self.http_status = http_status or type(self).default_http_status
        self.details: Dict[str, Any] = dict(details or {})
        self.cause = cause

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, code={self.code!r})"

    def to_dict(self, *, include_traceback: bool = False) -> Dict[str, Any]:
        """Structured form for log records and error bodies."""
        out: Dict[str, Any] = {
            "message": self.message,
            "code": self.code,
            "http_status": self.http_status,
        }
        if self.details:
            out["details"] = self.details
        if self.cause is not None:
            out["cause"] = str(self.cause)
            if include_traceback:
                out["cause_traceback"] = traceback.format_exception(
                    type(self.cause), self.cause, self.cause.__traceback__
                )
        return out


def exception_factory(
    name: str,
    *,
    code: Optional[str] = None,
    http_status: int = 500,
    base: Type[TruckMatesError] = TruckMatesError,
) -> Type[TruckMatesError]:
    """
    Declare an error type at runtime, e.g. for a new integration:

        TelematicsError = exception_factory(
            "TelematicsError", code="TELEMATICS_ERROR", http_status=502,
            base=ExternalServiceError,
        )
        raise TelematicsError("ELD feed unreachable", details={"provider": "samsara"})
    """
    return type(
        name,
        (base,),
        {
            "default_code": code or name.upper().replace(" ", "_"),
            "default_http_status": http_status,
        },
    )
