from pymongo.errors import PyMongoError

from telemetry.performance_log import PerformanceLog

class CoreServices:
    """Core service dependencies

    Holds the store gateway built at startup.

    - gateway: single sync MongoGateway owning the MongoClient
    - async_gateway: AsyncGatewayAdapter wrapping gateway for the API
    """

    def __init__(self):
        self.gateway = None
        self._async_adapter = None  # Lazy-created adapter for async API access

    @property
    def async_gateway(self):
        """Get async adapter for the gateway (lazy creation)."""
        if self._async_adapter is None and self.gateway is not None:
            from store.async_adapter import AsyncGatewayAdapter
            self._async_adapter = AsyncGatewayAdapter(self.gateway)
        return self._async_adapter

class TelemetryServices:
    """Performance log shared by every request"""

    def __init__(self):
        self.performance_log = PerformanceLog()

class AnalysisServices:
    """Repository analyzer (external collaborator)"""

    def __init__(self):
        self.analyzer = None

class AppState:
    """Application state container

    Composes focused state objects. Delegation methods hide the internal
    structure from route handlers (state.get_gateway() rather than
    state.core.gateway).
    """

    def __init__(self):
        self.core = CoreServices()
        self.telemetry = TelemetryServices()
        self.analysis = AnalysisServices()

    # === Service Access Delegation (for route handlers) ===

    def get_gateway(self):
        """Get sync store gateway"""
        return self.core.gateway

    def get_async_gateway(self):
        """Get async gateway for non-blocking API operations"""
        return self.core.async_gateway

    def get_performance_log(self):
        """Get shared performance log"""
        return self.telemetry.performance_log

    def get_analyzer(self):
        """Get repository analyzer"""
        return self.analysis.analyzer

    # === Lifecycle Management Delegation ===

    def close_gateway(self):
        """Close the MongoDB client.

        Only the sync gateway owns the connection; the async adapter is
        just a wrapper.
        """
        if self.core.gateway:
            self.core.gateway.close()

    def close_analyzer(self):
        """Close analyzer HTTP session"""
        if self.analysis.analyzer:
            self.analysis.analyzer.close()

    async def close_all_resources(self):
        """Close all resource connections"""
        self.close_gateway()
        self.close_analyzer()

    async def store_reachable(self) -> bool:
        """Ping the store (async, non-blocking for API routes)"""
        adapter = self.core.async_gateway
        if adapter is None:
            return False
        try:
            return await adapter.ping()
        except PyMongoError:
            return False
