"""Core: config, rate limiting, and application bootstrap."""

from projectgrid.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
