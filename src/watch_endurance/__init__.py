"""Battery endurance predictor for a wearable clock face."""

__version__ = "0.1.0"
