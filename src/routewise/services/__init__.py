"""Route estimation services."""
