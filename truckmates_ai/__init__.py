"""TruckMates AI: request orchestration for the logistics assistant."""

__version__ = "0.1.0"
