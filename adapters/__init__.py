"""Engine adapters behind one execute/list_targets/close contract."""

from adapters.base import (
    AdapterError,
    ConfigurationError,
    DatabaseAdapter,
    InvalidIdentifierError,
    InvalidRequestError,
)
from adapters.factory import SUPPORTED_ENGINES, get_adapter
from adapters.operations import Operation, OperationKind, QueryOptions

__all__ = [
    "AdapterError",
    "ConfigurationError",
    "DatabaseAdapter",
    "InvalidIdentifierError",
    "InvalidRequestError",
    "Operation",
    "OperationKind",
    "QueryOptions",
    "SUPPORTED_ENGINES",
    "get_adapter",
]
