from truckmates_ai.clients.realtime.web import WebRealtimeDataProvider

__all__ = ["WebRealtimeDataProvider"]
