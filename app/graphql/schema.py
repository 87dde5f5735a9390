import logging
from collections.abc import Mapping

import strawberry
from graphql import DocumentNode
from strawberry.fastapi import BaseContext
from strawberry.tools import create_type

from app.core.clock import Clock, SystemClock
from app.graphql.operations import OPERATIONS
from app.graphql.registry import Operation
from app.graphql.types.system import EchoResponse, PingResponse

from .extensions.error_handler import CustomErrorHandler
from .extensions.preparsed import PreparsedDocument

logger = logging.getLogger(__name__)


# --- Custom Context ---
# Carries the injected clock, the request start reading and, when the
# gateway already parsed it, the document to execute.
class Context(BaseContext):
    def __init__(
        self,
        clock: Clock | None = None,
        started_at: float | None = None,
        operations: Mapping[str, Operation] | None = None,
        document: DocumentNode | None = None,
    ) -> None:
        super().__init__()
        self.clock = clock or SystemClock()
        self.started_at = (
            started_at if started_at is not None else self.clock.monotonic()
        )
        self.operations = operations if operations is not None else OPERATIONS
        self.document = document


async def get_context() -> Context:
    """Context getter for the strawberry FastAPI router."""
    logger.debug("Creating GraphQL context")
    return Context()


def build_query_type(operations: Mapping[str, Operation]) -> type:
    """Generate the root Query type from the operation table."""
    fields = []
    for operation in operations.values():
        field = strawberry.field(
            resolver=operation.resolver,
            name=operation.name,
            description=operation.description,
        )
        field.python_name = operation.name
        fields.append(field)
    return create_type("Query", fields, description="Root query operations.")


Query = build_query_type(OPERATIONS)

# --- Schema Definition ---
schema = strawberry.Schema(
    query=Query,
    types=[EchoResponse, PingResponse],
    extensions=[CustomErrorHandler, PreparsedDocument],
)
