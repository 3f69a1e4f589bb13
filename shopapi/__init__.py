"""User accounts API and shared backend helpers."""

__version__ = "0.1.0"