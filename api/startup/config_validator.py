"""
Configuration validator for startup checks.

Validates configuration settings early to provide clear error messages
before the application attempts to connect with invalid settings.
"""
import logging
from typing import List
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

_MONGO_SCHEMES = ("mongodb", "mongodb+srv")


class ConfigValidationError(Exception):
    """Configuration validation failed"""
    pass


class ConfigValidator:
    """Validates configuration settings on startup"""

    def __init__(self, config):
        self.config = config
        self.errors: List[str] = []

    def validate(self) -> None:
        """Validate all configuration settings

        Raises:
            ConfigValidationError: If validation fails
        """
        self._validate_database_uri()
        self._validate_database_name()
        self._validate_limits()
        self._validate_performance_log()

        if self.errors:
            error_msg = "Configuration validation failed:\n" + "\n".join(
                f"  - {error}" for error in self.errors
            )
            raise ConfigValidationError(error_msg)

    def _validate_database_uri(self) -> None:
        """Validate MongoDB connection string"""
        uri = self.config.database.uri
        if not uri:
            self.errors.append(
                "MONGODB_URI environment variable is not defined\n"
                "    Set it in .env, e.g. MONGODB_URI=mongodb://localhost:27017"
            )
            return

        scheme = urlparse(uri).scheme
        if scheme not in _MONGO_SCHEMES:
            self.errors.append(
                f"MONGODB_URI must start with mongodb:// or mongodb+srv:// (got '{scheme}://')"
            )

    def _validate_database_name(self) -> None:
        """Validate logical database name"""
        name = self.config.database.name
        if not name or any(ch in name for ch in '/\\. "$'):
            self.errors.append(
                f"Invalid DB_NAME: '{name}'\n"
                "    Database names cannot be empty or contain /\\. \"$ or spaces"
            )

    def _validate_limits(self) -> None:
        """Validate per-operation limits"""
        limits = self.config.limits
        if limits.find_limit < 1:
            self.errors.append(f"FIND_LIMIT must be at least 1 (got {limits.find_limit})")
        if limits.bulk_insert_max < 1:
            self.errors.append(f"BULK_INSERT_MAX must be at least 1 (got {limits.bulk_insert_max})")

    def _validate_performance_log(self) -> None:
        """Validate performance log size"""
        size = self.config.performance.log_size
        if size < 1:
            self.errors.append(f"PERFORMANCE_LOG_SIZE must be at least 1 (got {size})")
        elif size > 1000:
            logger.warning(f"PERFORMANCE_LOG_SIZE is unusually large: {size}")
