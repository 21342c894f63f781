from truckmates_ai.orchestrator.context.aggregator import AggregatedContext, ContextAggregator
from truckmates_ai.orchestrator.context.retrieval import BaseRetrievalService, NullRetrievalService
from truckmates_ai.orchestrator.context.sources import (
    REALTIME_SOURCES,
    BaseRealtimeDataProvider,
    FetchInputs,
    RealtimeSource,
    SubIntent,
    detect_sub_intents,
)

__all__ = [
    "AggregatedContext",
    "ContextAggregator",
    "BaseRetrievalService",
    "NullRetrievalService",
    "REALTIME_SOURCES",
    "BaseRealtimeDataProvider",
    "FetchInputs",
    "RealtimeSource",
    "SubIntent",
    "detect_sub_intents",
]
