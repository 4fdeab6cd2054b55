"""Route group exports."""

from . import health, locations, session

__all__ = ["health", "locations", "session"]
