"""Informix dialect adapter for generic query layers."""

from __future__ import annotations

__version__ = "0.1.0"

from .config import AdapterConfig, ConnectionConfig, NamedConnectionConfig, load_config
from .connection import InformixConnection
from .dsn import build_dsn, parse_dsn
from .errors import ConnectError, DatabaseError, MetadataQueryError, QueryExecutionError
from .factory import open_connection
from .introspection import ColumnType, DeleteRule, IndexType, TypeCodeTable
from .models import ColumnDescriptor, ErrorInfo, ForeignKeyDescriptor, IndexDescriptor
from .native import DbapiNativeClient, NativeClient, NativeConnection, NativeDriverError, NativeResult, OpenOptions

__all__ = [
    "AdapterConfig",
    "ColumnDescriptor",
    "ColumnType",
    "ConnectError",
    "ConnectionConfig",
    "DatabaseError",
    "DbapiNativeClient",
    "DeleteRule",
    "ErrorInfo",
    "ForeignKeyDescriptor",
    "IndexDescriptor",
    "IndexType",
    "InformixConnection",
    "MetadataQueryError",
    "NamedConnectionConfig",
    "NativeClient",
    "NativeConnection",
    "NativeDriverError",
    "NativeResult",
    "OpenOptions",
    "QueryExecutionError",
    "TypeCodeTable",
    "__version__",
    "build_dsn",
    "load_config",
    "open_connection",
    "parse_dsn",
]
