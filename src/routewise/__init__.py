"""Route estimation engine for map-selected locations."""

__version__ = "0.1.0"
