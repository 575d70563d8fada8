"""
Environment configuration loader.

Reading environment variables lives here, next to the data source,
rather than in the Config dataclasses.
"""
import os
from config import (
    Config, DatabaseConfig, LimitsConfig, PerformanceConfig,
    AnalyzerConfig, LoggingConfig
)

class EnvironmentConfigLoader:
    """Loads configuration from environment variables."""

    def load(self) -> Config:
        """Create Config from environment variables"""
        return Config(
            database=self._load_database_config(),
            limits=self._load_limits_config(),
            performance=self._load_performance_config(),
            analyzer=self._load_analyzer_config(),
            logging=self._load_logging_config()
        )

    def _load_database_config(self) -> DatabaseConfig:
        """Load MongoDB connection configuration from environment"""
        return DatabaseConfig(
            uri=self._get_optional("MONGODB_URI", ""),
            name=self._get_optional("DB_NAME", DatabaseConfig.name),
            timeout_ms=self._get_int("MONGODB_TIMEOUT_MS", DatabaseConfig.timeout_ms)
        )

    def _load_limits_config(self) -> LimitsConfig:
        """Load operation limits from environment"""
        return LimitsConfig(
            find_limit=self._get_int("FIND_LIMIT", 100),
            bulk_insert_max=self._get_int("BULK_INSERT_MAX", 100)
        )

    def _load_performance_config(self) -> PerformanceConfig:
        """Load performance log configuration from environment"""
        return PerformanceConfig(
            log_size=self._get_int("PERFORMANCE_LOG_SIZE", 50)
        )

    def _load_analyzer_config(self) -> AnalyzerConfig:
        """Load repository analyzer configuration from environment"""
        return AnalyzerConfig(
            github_token=self._get_optional("GITHUB_TOKEN", ""),
            max_files=self._get_int("ANALYZER_MAX_FILES", 30),
            max_workers=self._get_int("ANALYZER_MAX_WORKERS", 10),
            timeout=self._get_float("ANALYZER_TIMEOUT", 10.0)
        )

    def _load_logging_config(self) -> LoggingConfig:
        return LoggingConfig(
            level=self._get_optional("LOG_LEVEL", "INFO").upper()
        )

    def _get_optional(self, key: str, default: str) -> str:
        """Get optional string environment variable"""
        return os.getenv(key, default)

    def _get_int(self, key: str, default: int) -> int:
        """Get integer environment variable"""
        value = os.getenv(key, str(default))
        return int(value)

    def _get_float(self, key: str, default: float) -> float:
        """Get float environment variable"""
        value = os.getenv(key, str(default))
        return float(value)
