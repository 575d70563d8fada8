"""
Tests for StartupManager behavior.

Tests use initialize() and assert on state changes, not implementation details.
"""
import pytest
from unittest.mock import patch

from app_state import AppState
from config import (
    AnalyzerConfig, Config, DatabaseConfig, LimitsConfig,
    LoggingConfig, PerformanceConfig
)
from startup.config_validator import ConfigValidationError
from startup.manager import StartupManager


def make_config(uri="mongodb://localhost:27017", log_size=50):
    return Config(
        database=DatabaseConfig(uri=uri),
        limits=LimitsConfig(),
        performance=PerformanceConfig(log_size=log_size),
        analyzer=AnalyzerConfig(),
        logging=LoggingConfig(),
    )


class TestStartupManagerInitialize:
    """Test StartupManager.initialize() - the public interface"""

    @pytest.fixture
    def mock_gateway_class(self):
        with patch('startup.manager.MongoGateway') as gateway_class:
            yield gateway_class

    @pytest.mark.asyncio
    async def test_initialize_populates_state(self, mock_gateway_class):
        state = AppState()

        await StartupManager(state, make_config(log_size=10)).initialize()

        assert state.get_gateway() is mock_gateway_class.return_value
        mock_gateway_class.return_value.connect.assert_called_once()
        assert state.get_performance_log().max_entries == 10
        assert state.get_analyzer() is not None

    @pytest.mark.asyncio
    async def test_invalid_config_stops_startup(self, mock_gateway_class):
        state = AppState()

        with pytest.raises(ConfigValidationError):
            await StartupManager(state, make_config(uri="")).initialize()

        mock_gateway_class.assert_not_called()
        assert state.get_gateway() is None

    def test_uses_default_config(self):
        from config import default_config
        manager = StartupManager(AppState())

        assert manager.config is default_config
