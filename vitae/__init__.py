"""Self-hosted content store for the Arcanum Vitae site."""

__version__ = "1.0.0"
