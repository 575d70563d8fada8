"""
Pytest configuration and shared fixtures

Common fixtures used across multiple test files are defined here.
No test needs a running MongoDB: the gateway is always a mock.
"""
import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import pytest
from bson.objectid import ObjectId

# Add api directory to path for imports
# Detect if running in Docker (./api:/app mount) vs host (./api exists)
api_path = Path(__file__).parent.parent / "api"
if not api_path.exists():
    # Running in Docker where api contents are at /app directly
    api_path = Path(__file__).parent.parent
sys.path.insert(0, str(api_path))


# =============================================================================
# Explain Output Samples
# =============================================================================

COLLSCAN_EXPLAIN = {
    'queryPlanner': {'winningPlan': {'stage': 'COLLSCAN', 'direction': 'forward'}},
    'executionStats': {'executionTimeMillis': 0, 'totalDocsExamined': 0, 'totalKeysExamined': 0},
}


def ixscan_explain(index_name='name_1', docs_examined=1):
    """Explain output for a FETCH over an index scan"""
    return {
        'queryPlanner': {
            'winningPlan': {
                'stage': 'FETCH',
                'inputStage': {'stage': 'IXSCAN', 'indexName': index_name, 'keyPattern': {'name': 1}},
            }
        },
        'executionStats': {
            'executionTimeMillis': 1,
            'totalDocsExamined': docs_examined,
            'totalKeysExamined': docs_examined,
        },
    }


# =============================================================================
# Common Mock Fixtures
# =============================================================================

@pytest.fixture
def mock_gateway():
    """Async gateway mock with driver-shaped return values.

    Use this fixture for executor and admin tests. Every method is an
    AsyncMock; override return_value/side_effect per test.
    """
    gateway = Mock()

    inserted_id = ObjectId()
    gateway.insert_one = AsyncMock(
        return_value=SimpleNamespace(inserted_id=inserted_id, acknowledged=True)
    )
    gateway.find_one = AsyncMock(return_value=None)
    gateway.insert_many = AsyncMock(
        side_effect=lambda docs: SimpleNamespace(
            inserted_ids=[ObjectId() for _ in docs], acknowledged=True
        )
    )
    gateway.update_many = AsyncMock(
        return_value=SimpleNamespace(matched_count=0, modified_count=0, acknowledged=True)
    )
    gateway.delete_many = AsyncMock(
        return_value=SimpleNamespace(deleted_count=0, acknowledged=True)
    )
    gateway.reset = AsyncMock(return_value=SimpleNamespace(deleted_count=0, acknowledged=True))
    gateway.create_index = AsyncMock(return_value='name_1')
    gateway.find = AsyncMock(return_value=[])
    gateway.aggregate = AsyncMock(return_value=[])
    gateway.explain_find = AsyncMock(return_value=COLLSCAN_EXPLAIN)
    gateway.explain_aggregate = AsyncMock(return_value=COLLSCAN_EXPLAIN)
    gateway.collection_stats = AsyncMock(
        return_value={'storageSize': 4096, 'avgObjSize': 64, 'totalIndexSize': 4096}
    )
    gateway.list_indexes = AsyncMock(return_value=[{'name': '_id_', 'key': {'_id': 1}}])
    gateway.count_documents = AsyncMock(return_value=0)
    gateway.ping = AsyncMock(return_value=True)
    return gateway


@pytest.fixture
def performance_log():
    """Empty performance log with the default capacity"""
    from telemetry.performance_log import PerformanceLog
    return PerformanceLog()


@pytest.fixture
def executor(mock_gateway, performance_log):
    """OperationExecutor wired to the mock gateway"""
    from operations.operation_executor import OperationExecutor
    return OperationExecutor(mock_gateway, performance_log)


@pytest.fixture
def mock_app_state(mock_gateway, performance_log):
    """Create mock AppState exposing the delegation methods routes use."""
    state = Mock()
    state.get_async_gateway = Mock(return_value=mock_gateway)
    state.get_performance_log = Mock(return_value=performance_log)
    state.get_analyzer = Mock(return_value=Mock())
    state.store_reachable = AsyncMock(return_value=True)
    return state


@pytest.fixture
def make_client(mock_app_state):
    """Factory building a TestClient around one router with mocked state"""
    from fastapi import FastAPI
    from fastapi.testclient import TestClient

    def _make(router):
        app = FastAPI()
        app.include_router(router)
        app.state.app_state = mock_app_state
        return TestClient(app)

    return _make


@pytest.fixture
def collscan_explain():
    """Explain output for an unindexed query"""
    return COLLSCAN_EXPLAIN


@pytest.fixture
def ixscan():
    """Factory for explain output that used an index"""
    return ixscan_explain
