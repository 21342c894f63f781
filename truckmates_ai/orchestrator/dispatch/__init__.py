from truckmates_ai.orchestrator.dispatch.dispatcher import FunctionDispatcher
from truckmates_ai.orchestrator.dispatch.registry import FunctionRegistry, RegisteredFunction

__all__ = ["FunctionDispatcher", "FunctionRegistry", "RegisteredFunction"]
