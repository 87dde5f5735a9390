# Mapping of GraphQL and gateway failures to serialized error entries.

import logging
from typing import Any

from graphql import GraphQLError

from app.schemas.graphql import ErrorEntry, ErrorLocation

logger = logging.getLogger(__name__)


def format_graphql_error(error: GraphQLError) -> dict[str, Any]:
    """Serialize a GraphQLError as an error entry.

    ``path`` and ``locations`` are always present (null when unknown);
    ``extensions`` only when the error carries any.
    """
    entry = ErrorEntry(
        message=error.message,
        locations=[
            ErrorLocation(line=loc.line, column=loc.column) for loc in error.locations
        ]
        if error.locations
        else None,
        path=list(error.path) if error.path else None,
        extensions=error.extensions or None,
    )
    formatted = entry.model_dump()
    if formatted["extensions"] is None:
        del formatted["extensions"]
    return formatted


def error_entry(message: str, code: str | None = None) -> dict[str, Any]:
    """Build a gateway-level error entry with no location or path."""
    return format_graphql_error(
        GraphQLError(message, extensions={"code": code} if code else None)
    )


def map_exception_to_error_entry(exc: Exception) -> dict[str, Any]:
    """Fallback for failures outside field execution."""
    if isinstance(exc, GraphQLError):
        return format_graphql_error(exc)
    logger.exception(
        f"Unhandled exception mapped to INTERNAL_SERVER_ERROR: {type(exc).__name__}: {exc}"
    )
    return error_entry("An unexpected error occurred.", code="INTERNAL_SERVER_ERROR")
