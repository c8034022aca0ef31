#!/usr/bin/env python3
"""
Configuration settings for schema loading and metadata tree requests.

These settings can be overridden via environment variables to adjust
upload limits and loader behaviour per deployment (local dev vs production).
Values edited on Windows keep a trailing carriage return, so every value is
stripped before it is converted.
"""

import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)

# Default token for development - CHANGE THIS IN PRODUCTION!
DEFAULT_DEV_TOKEN = "devtoken"

_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off", "")


class MetadataConfig:
    """Upload limits, loader options and HTTP settings for metadata tree building.

    Values are read when an instance is created, so tests can patch the
    environment and build a fresh instance.
    """

    def __init__(self):
        # Schema sets often ship 20+ XSD files (imported reference schemas)
        self.MAX_SCHEMA_FILES = self._int("METADATA_MAX_SCHEMA_FILES", 50)

        # Total size of one upload, in megabytes
        self.MAX_SCHEMA_SIZE_MB = self._int("METADATA_MAX_SCHEMA_SIZE_MB", 20)

        # Follow xs:include / xs:import / xs:redefine schemaLocation links
        self.FOLLOW_SCHEMA_LOCATIONS = self._bool("METADATA_FOLLOW_SCHEMA_LOCATIONS", True)

        self.LOG_LEVEL = (self._str("METADATA_LOG_LEVEL") or "INFO").upper()

        # HTTP layer
        self.CORS_ORIGINS = self._origins("CORS_ORIGINS", ["http://localhost:3000"])
        self.APP_VERSION = self._str("APP_VERSION") or "unknown"
        self.DEV_TOKEN = self._str("DEV_TOKEN") or DEFAULT_DEV_TOKEN

    @property
    def max_schema_size_bytes(self) -> int:
        return self.MAX_SCHEMA_SIZE_MB * 1024 * 1024

    @property
    def uses_default_token(self) -> bool:
        return self.DEV_TOKEN == DEFAULT_DEV_TOKEN

    def get_upload_limit(self, limit_type: str) -> int:
        """Get an upload limit by name.

        Args:
            limit_type: One of 'files', 'bytes'

        Returns:
            Configured limit, or 0 for an unknown name
        """
        limits = {
            "files": self.MAX_SCHEMA_FILES,
            "bytes": self.max_schema_size_bytes,
        }
        return limits.get(limit_type, 0)

    @staticmethod
    def _str(key: str) -> Optional[str]:
        raw_value = os.getenv(key)
        if raw_value is None:
            return None

        cleaned = raw_value.strip()
        if cleaned != raw_value:
            logger.warning(f"Setting {key} had trailing whitespace/line endings: {repr(raw_value)}")
        return cleaned

    def _int(self, key: str, default: int) -> int:
        raw_value = self._str(key)
        if raw_value is None:
            return default

        try:
            return int(raw_value)
        except ValueError:
            logger.warning(f"Setting {key} is not a valid integer: {repr(raw_value)}. Using default: {default}")
            return default

    def _bool(self, key: str, default: bool) -> bool:
        raw_value = self._str(key)
        if raw_value is None:
            return default

        lowered = raw_value.lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False

        logger.warning(f"Setting {key} has unexpected boolean value: {repr(raw_value)}. Using default: {default}")
        return default

    def _origins(self, key: str, default: list[str]) -> list[str]:
        origins = [origin.strip() for origin in (self._str(key) or "").split(",") if origin.strip()]
        return origins or default


# Singleton instance
metadata_config = MetadataConfig()
