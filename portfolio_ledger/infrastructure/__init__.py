"""Infrastructure layer: logging, settings and persistence adapters."""
