"""Location data sources."""
