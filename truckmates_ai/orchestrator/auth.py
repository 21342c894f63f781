"""Caller/tenant resolution contract used by the AUTHENTICATE step."""
from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from typing import Dict, Mapping, Optional

from truckmates_ai.core.exceptions import AuthenticationError, ConfigurationError
from truckmates_ai.orchestrator.types import CallerIdentity

logger = logging.getLogger(__name__)


class BaseAuthResolver(ABC):
    @abstractmethod
    async def resolve(self, caller_token: Optional[str]) -> CallerIdentity:
        """Return the caller's identity or raise ``AuthenticationError``.

        A resolved identity may lack ``company_id``; the orchestrator reports
        that separately from an unknown caller.
        """


class StaticTokenAuthResolver(BaseAuthResolver):
    """Bearer tokens mapped to identities held in memory (service accounts, dev setups)."""

    def __init__(self, tokens: Mapping[str, CallerIdentity]) -> None:
        self._tokens: Dict[str, CallerIdentity] = dict(tokens)

    async def resolve(self, caller_token: Optional[str]) -> CallerIdentity:
        token = (caller_token or "").strip()
        if token.lower().startswith("bearer "):
            token = token[7:].strip()
        if not token:
            raise AuthenticationError("Not authenticated")
        identity = self._tokens.get(token)
        if identity is None:
            raise AuthenticationError("Not authenticated", details={"reason": "unknown token"})
        return identity

    @classmethod
    def from_string(cls, spec: str) -> "StaticTokenAuthResolver":
        """Parse ``"token=user_id:company_id,token2=user_id2"``; company is optional."""
        tokens: Dict[str, CallerIdentity] = {}
        for raw in (spec or "").split(","):
            entry = raw.strip()
            if not entry:
                continue
            token, sep, ident = entry.partition("=")
            if not sep or not token.strip() or not ident.strip():
                raise ConfigurationError(f"Malformed token entry: {entry!r}")
            user_id, _, company_id = ident.partition(":")
            tokens[token.strip()] = CallerIdentity(
                user_id=user_id.strip(),
                company_id=company_id.strip() or None,
            )
        return cls(tokens)

    @classmethod
    def from_env(cls, var: str = "TRUCKMATES_API_TOKENS") -> "StaticTokenAuthResolver":
        resolver = cls.from_string(os.environ.get(var, ""))
        if not resolver._tokens:
            logger.warning("StaticTokenAuthResolver: %s is empty, every request will be rejected", var)
        return resolver
