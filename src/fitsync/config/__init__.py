"""Configuration package."""

from fitsync.config.settings import Settings

__all__ = ["Settings"]
