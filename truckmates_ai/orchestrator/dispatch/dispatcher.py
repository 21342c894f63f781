"""FunctionDispatcher: executes model-requested calls with per-call failure isolation."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Optional, Sequence

from truckmates_ai.core.exceptions import DispatchError, FunctionNotFoundError
from truckmates_ai.orchestrator.dispatch.registry import FunctionRegistry
from truckmates_ai.orchestrator.types import ActionResult, FunctionCall

logger = logging.getLogger(__name__)


class FunctionDispatcher:
    """Run calls one at a time in emission order.

    Produces exactly one ``ActionResult`` per call. An unknown name, a handler
    exception or a timeout on one call is recorded on that call's result and
    never stops or reorders the others.
    """

    def __init__(
        self,
        registry: FunctionRegistry,
        *,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        self._registry = registry
        self._timeout = timeout_seconds

    async def dispatch(self, calls: Sequence[FunctionCall]) -> List[ActionResult]:
        results: List[ActionResult] = []
        for call in calls:
            results.append(await self._dispatch_one(call))
        return results

    async def _dispatch_one(self, call: FunctionCall) -> ActionResult:
        try:
            result = await self._invoke(call)
        except DispatchError as exc:
            logger.warning("FunctionDispatcher: %s", exc)
            return ActionResult(function=call.name, result=None, error=exc.message)
        except Exception as exc:
            logger.error(
                "FunctionDispatcher: function '%s' raised with args %s: %s",
                call.name, call.arguments, exc,
            )
            return ActionResult(
                function=call.name,
                result=None,
                error=str(exc) or "Function execution failed",
            )
        logger.info("FunctionDispatcher: function '%s' completed", call.name)
        return ActionResult(function=call.name, result=result)

    async def _invoke(self, call: FunctionCall) -> Any:
        handler = self._registry.resolve(call.name)
        if handler is None:
            raise FunctionNotFoundError(
                f"Function {call.name} not found",
                details={"function": call.name},
            )
        coro = handler(dict(call.arguments or {}))
        if self._timeout is None or self._timeout <= 0:
            return await coro
        try:
            return await asyncio.wait_for(coro, timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            raise DispatchError(
                f"Function {call.name} timed out after {self._timeout:g}s",
                details={"function": call.name},
                cause=exc,
            ) from exc
