"""
Unit tests for config module
"""
import pytest
from unittest.mock import patch

from config import (
    AnalyzerConfig,
    COLLECTION_NAME,
    Config,
    DatabaseConfig,
    LimitsConfig,
    PerformanceConfig,
)
from environment_config_loader import EnvironmentConfigLoader


class TestDatabaseConfig:
    """Tests for DatabaseConfig"""

    def test_default_values(self):
        config = DatabaseConfig()
        assert config.uri == ""
        assert config.name == "mongoflow_demo"
        assert config.collection == COLLECTION_NAME == "demo_collection"
        assert config.timeout_ms == 5000
        assert not config.is_configured

    def test_configured_with_uri(self):
        assert DatabaseConfig(uri="mongodb://localhost:27017").is_configured


class TestLimitsAndLogDefaults:

    def test_limits(self):
        limits = LimitsConfig()
        assert limits.find_limit == 100
        assert limits.bulk_insert_max == 100

    def test_performance_log_size(self):
        assert PerformanceConfig().log_size == 50

    def test_analyzer(self):
        analyzer = AnalyzerConfig()
        assert analyzer.max_files == 30
        assert analyzer.github_token == ""


class TestEnvironmentConfigLoader:
    """Tests for loading Config from environment variables"""

    def test_reads_environment(self):
        env = {
            'MONGODB_URI': 'mongodb://db:27017',
            'DB_NAME': 'classroom',
            'MONGODB_TIMEOUT_MS': '2000',
            'FIND_LIMIT': '20',
            'BULK_INSERT_MAX': '10',
            'PERFORMANCE_LOG_SIZE': '25',
            'GITHUB_TOKEN': 'ghp_x',
            'ANALYZER_MAX_FILES': '5',
            'ANALYZER_TIMEOUT': '2.5',
            'LOG_LEVEL': 'debug',
        }
        with patch.dict('os.environ', env):
            config = EnvironmentConfigLoader().load()

        assert config.database.uri == 'mongodb://db:27017'
        assert config.database.name == 'classroom'
        assert config.database.timeout_ms == 2000
        assert config.limits.find_limit == 20
        assert config.limits.bulk_insert_max == 10
        assert config.performance.log_size == 25
        assert config.analyzer.github_token == 'ghp_x'
        assert config.analyzer.max_files == 5
        assert config.analyzer.timeout == 2.5
        assert config.logging.level == 'DEBUG'

    def test_collection_not_configurable(self):
        with patch.dict('os.environ', {'COLLECTION_NAME': 'other'}):
            config = EnvironmentConfigLoader().load()

        assert config.database.collection == "demo_collection"

    def test_defaults_when_unset(self):
        with patch.dict('os.environ', {}, clear=True):
            config = Config.from_env()

        assert config.database.name == "mongoflow_demo"
        assert config.limits.find_limit == 100

    def test_invalid_integer(self):
        with patch.dict('os.environ', {'FIND_LIMIT': 'lots'}):
            with pytest.raises(ValueError):
                EnvironmentConfigLoader().load()
