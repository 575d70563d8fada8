"""Supported playground operations"""
from enum import Enum


class OperationKind(Enum):
    """The six database actions a user can run"""
    INSERT = "insert"
    BULK_INSERT = "bulk-insert"
    FIND = "find"
    UPDATE = "update"
    DELETE = "delete"
    AGGREGATE = "aggregate"

    @property
    def store_operation(self) -> str:
        """Driver call this kind maps onto, as reported in metrics"""
        return _STORE_OPERATIONS[self]

    @classmethod
    def parse(cls, value: str) -> 'OperationKind':
        """Look up a kind by its wire name, e.g. "bulk-insert" """
        normalized = value.strip().lower().replace("_", "-")
        for kind in cls:
            if kind.value == normalized:
                return kind
        raise ValueError(f"Unknown operation: {value}")


_STORE_OPERATIONS = {
    OperationKind.INSERT: "insertOne",
    OperationKind.BULK_INSERT: "insertMany",
    OperationKind.FIND: "find",
    OperationKind.UPDATE: "updateMany",
    OperationKind.DELETE: "deleteMany",
    OperationKind.AGGREGATE: "aggregate",
}
