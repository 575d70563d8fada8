"""Startup manager - orchestrates application initialization.

Builds the gateway, performance log and analyzer once, stores them in
AppState, and connects the gateway. Everything built here is closed by
AppState.close_all_resources() on shutdown.
"""
import logging

from config import default_config
from app_state import AppState
from store.gateway import MongoGateway
from telemetry.performance_log import PerformanceLog
from analysis.repository_analyzer import RepositoryAnalyzer
from startup.config_validator import ConfigValidator

logger = logging.getLogger(__name__)


class StartupManager:
    """Manages application startup."""

    def __init__(self, app_state: AppState, config=None):
        self.state = app_state
        self.config = config or default_config

    async def initialize(self):
        """Initialize all components"""
        logger.info("Initializing MongoFlow Studio...")
        self._validate_config()
        self._init_gateway()
        self._init_performance_log()
        self._init_analyzer()
        logger.info("MongoFlow Studio ready")

    def _validate_config(self):
        """Validate configuration before startup"""
        validator = ConfigValidator(self.config)
        validator.validate()
        logger.info("Configuration validated")

    def _init_gateway(self):
        """Create and connect the single store gateway.

        MongoClient connects lazily, so this does not block on the server;
        the first operation surfaces connectivity errors as a 500 envelope.
        """
        gateway = MongoGateway(self.config.database)
        gateway.connect()
        self.state.core.gateway = gateway

    def _init_performance_log(self):
        """Size the performance log from configuration"""
        self.state.telemetry.performance_log = PerformanceLog(self.config.performance.log_size)

    def _init_analyzer(self):
        self.state.analysis.analyzer = RepositoryAnalyzer(self.config.analyzer)
