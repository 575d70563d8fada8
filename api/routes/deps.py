"""Route dependencies and helpers

Provides clean access to application state without Law of Demeter violations.
"""
from fastapi import Request
from fastapi.responses import JSONResponse

from app_state import AppState
from config import default_config
from operations.collection_admin import CollectionAdmin
from operations.operation_executor import OperationExecutor
from value_objects import OperationResult


def get_app_state(request: Request) -> AppState:
    """Get AppState from request

    Encapsulates the request.app.state.app_state chain.

    Usage:
        @router.get("/example")
        async def example(request: Request):
            app_state = get_app_state(request)
    """
    return request.app.state.app_state


def get_executor(request: Request) -> OperationExecutor:
    """Executor wired to the shared gateway and performance log"""
    app_state = get_app_state(request)
    return OperationExecutor(
        app_state.get_async_gateway(),
        app_state.get_performance_log(),
        default_config.limits,
    )


def get_collection_admin(request: Request) -> CollectionAdmin:
    return CollectionAdmin(get_app_state(request).get_async_gateway())


def envelope_response(result: OperationResult) -> JSONResponse:
    """Serialize an envelope with its HTTP-equivalent status"""
    return JSONResponse(result.to_response(), status_code=result.status_code)


def unexpected_error_response(operation: str, error: Exception) -> JSONResponse:
    """Envelope for failures outside the operation taxonomy"""
    return JSONResponse(
        {
            'success': False,
            'error': str(error) or error.__class__.__name__,
            'metrics': {'executionTime': 0, 'operation': operation},
        },
        status_code=500,
    )
