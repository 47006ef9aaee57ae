"""GeoCatch - location-based creature spawning and catching."""

__version__ = "0.1.0"
