"""FunctionRegistry: the catalog of capabilities the model may invoke."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Set

from truckmates_ai.orchestrator.types import FunctionDefinition, FunctionHandler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegisteredFunction:
    definition: FunctionDefinition
    handler: FunctionHandler

    @property
    def name(self) -> str:
        return self.definition.name


class FunctionRegistry:
    """Registry of callable functions, with per-name enable/disable."""

    def __init__(self) -> None:
        self._functions: Dict[str, RegisteredFunction] = {}
        self._disabled: Set[str] = set()

    def register(self, function: RegisteredFunction) -> None:
        if function.name in self._functions:
            logger.warning("FunctionRegistry: replacing existing function '%s'", function.name)
        self._functions[function.name] = function
        logger.info("FunctionRegistry: registered function '%s'", function.name)

    def get(self, name: str) -> Optional[RegisteredFunction]:
        return self._functions.get(name)

    def enable(self, name: str) -> None:
        self._disabled.discard(name)
        logger.info("FunctionRegistry: enabled function '%s'", name)

    def disable(self, name: str) -> None:
        self._disabled.add(name)
        logger.info("FunctionRegistry: disabled function '%s'", name)

    def is_enabled(self, name: str) -> bool:
        return name in self._functions and name not in self._disabled

    @property
    def names(self) -> List[str]:
        """All registered names regardless of enabled state."""
        return list(self._functions)

    def list_definitions(self) -> List[FunctionDefinition]:
        """Definitions of enabled functions, in registration order (prompt catalog)."""
        return [
            f.definition
            for f in self._functions.values()
            if f.name not in self._disabled
        ]

    def resolve(self, name: str) -> Optional[FunctionHandler]:
        """Handler for an enabled function, or None when unknown or disabled."""
        if not self.is_enabled(name):
            return None
        return self._functions[name].handler
