"""Operation error taxonomy.

Both errors are caught at the executor boundary and converted into
envelopes; nothing escapes to the HTTP layer as an unhandled fault.
"""


class OperationError(Exception):
    """Base class for operation failures"""
    status_code = 500


class RequestShapeError(OperationError):
    """Payload failed per-kind structural validation. Never reaches the store."""
    status_code = 400


class StoreError(OperationError):
    """The backing store call itself failed"""
    status_code = 500
