"""Configuration package exports."""

from .loader import ConfigLocator, ConfigRepository
from .models import IngestConfig

__all__ = ["ConfigLocator", "ConfigRepository", "IngestConfig"]
