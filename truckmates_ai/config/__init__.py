"""
Runtime config loaded from env.

Load from env: load_inference_config(), load_realtime_config().
"""
from truckmates_ai.config.inference import InferenceConfig, load_inference_config
from truckmates_ai.config.realtime import RealtimeConfig, load_realtime_config

__all__ = [
    "InferenceConfig",
    "load_inference_config",
    "RealtimeConfig",
    "load_realtime_config",
]
