"""Retrieval collaborator contract.

The platform search (loads, drivers, trucks, routes) and the logistics
knowledge base live outside this package; the orchestrator only needs one
call that returns both the entity buckets and the knowledge slice.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from truckmates_ai.orchestrator.types import RetrievalContext

logger = logging.getLogger(__name__)


class BaseRetrievalService(ABC):
    @abstractmethod
    async def retrieve_context(
        self,
        query: str,
        user_id: str,
        company_id: str,
    ) -> RetrievalContext:
        """Return records scoped to ``company_id`` plus relevant knowledge entries.

        Implementations raise ``RetrievalError`` on backend failure.
        """


class NullRetrievalService(BaseRetrievalService):
    """Used when no retrieval backend is wired: every bucket is empty."""

    async def retrieve_context(
        self,
        query: str,
        user_id: str,
        company_id: str,
    ) -> RetrievalContext:
        logger.debug("NullRetrievalService: no backend configured, returning empty context")
        return RetrievalContext()
