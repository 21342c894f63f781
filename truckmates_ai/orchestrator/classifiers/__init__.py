from truckmates_ai.orchestrator.classifiers.intent_classifier import (
    INTERNET_KEYWORDS,
    InternetIntentClassifier,
    needs_external_data,
)
from truckmates_ai.orchestrator.classifiers.location_extractor import (
    COMMON_CITIES,
    Route,
    extract_locations,
    extract_route,
)

__all__ = [
    "INTERNET_KEYWORDS",
    "InternetIntentClassifier",
    "needs_external_data",
    "COMMON_CITIES",
    "Route",
    "extract_locations",
    "extract_route",
]
