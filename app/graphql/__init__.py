"""Export GraphQL components for use in the main application."""

# Schema
from .schema import Context, Query, get_context, schema

# Operation table
from .operations import OPERATIONS, registry
from .registry import (
    ArgumentSpec,
    ArgumentValue,
    Operation,
    OperationRegistry,
    ValueKind,
    bind_arguments,
)

# Gateway
from .gateway import GatewayResult, QueryGateway, select_operation

# Error handling utilities
from .errors import format_graphql_error, map_exception_to_error_entry

__all__ = [
    # Schema
    "schema",
    "Context",
    "Query",
    "get_context",

    # Operation table
    "OPERATIONS",
    "registry",
    "ArgumentSpec",
    "ArgumentValue",
    "Operation",
    "OperationRegistry",
    "ValueKind",
    "bind_arguments",

    # Gateway
    "GatewayResult",
    "QueryGateway",
    "select_operation",

    # Error handling
    "format_graphql_error",
    "map_exception_to_error_entry",
]
