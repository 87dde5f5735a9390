"""Query gateway: one request in, data and/or error entries out.

The gateway parses the document itself so that operation selection failures
(ambiguous, unknown or missing operation) become error entries instead of
surfacing from the executor. The parsed document travels on the context and
the schema executes it without parsing again. Validation, variable coercion
and execution are delegated to the strawberry schema.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import strawberry
from graphql import DocumentNode, GraphQLError, OperationDefinitionNode, parse

from app.core.clock import Clock, SystemClock
from app.graphql.errors import format_graphql_error, map_exception_to_error_entry
from app.graphql.registry import Operation
from app.graphql.schema import Context
from app.schemas.graphql import GraphQLRequest

logger = logging.getLogger(__name__)


@dataclass
class GatewayResult:
    data: dict[str, Any] | None = None
    errors: list[dict[str, Any]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        # `data` is absent when execution never started
        response: dict[str, Any] = {}
        if self.data is not None:
            response["data"] = self.data
        if self.errors:
            response["errors"] = self.errors
        return response


def select_operation(
    document: DocumentNode, operation_name: str | None
) -> OperationDefinitionNode:
    """Pick the operation to run, raising GraphQLError when none can be chosen."""
    operations = [
        definition
        for definition in document.definitions
        if isinstance(definition, OperationDefinitionNode)
    ]
    if not operations:
        raise GraphQLError("Document does not contain any operation.")

    if operation_name is None:
        if len(operations) > 1:
            raise GraphQLError(
                "Must provide operation name if query contains multiple operations."
            )
        return operations[0]

    for operation in operations:
        if operation.name and operation.name.value == operation_name:
            return operation
    raise GraphQLError(f"Unknown operation named '{operation_name}'.")


class QueryGateway:
    def __init__(
        self,
        schema: strawberry.Schema,
        clock: Clock | None = None,
        operations: Mapping[str, Operation] | None = None,
    ):
        self.schema = schema
        self.clock = clock or SystemClock()
        self.operations = operations

    def _prepare(
        self, request: GraphQLRequest
    ) -> tuple[DocumentNode | None, GatewayResult | None]:
        """Parse and select; returns a finished result when either fails."""
        try:
            document = parse(request.query)
            select_operation(document, request.operation_name)
        except GraphQLError as e:
            logger.info(
                f"Rejected GraphQL document: {e.message}",
                extra={"props": {"operation_name": request.operation_name}},
            )
            return None, GatewayResult(errors=[format_graphql_error(e)])
        return document, None

    def _context(self, document: DocumentNode, started_at: float) -> Context:
        # The schema executes this document instead of parsing the query again
        return Context(
            clock=self.clock,
            started_at=started_at,
            operations=self.operations,
            document=document,
        )

    def _result(self, execution_result: Any) -> GatewayResult:
        errors = [format_graphql_error(e) for e in execution_result.errors or []]
        return GatewayResult(data=execution_result.data, errors=errors)

    async def execute(self, request: GraphQLRequest) -> GatewayResult:
        started_at = self.clock.monotonic()
        document, rejected = self._prepare(request)
        if rejected is not None:
            return rejected
        context = self._context(document, started_at)
        try:
            execution_result = await self.schema.execute(
                request.query,
                variable_values=request.variables,
                context_value=context,
                operation_name=request.operation_name,
            )
        except Exception as e:
            return GatewayResult(errors=[map_exception_to_error_entry(e)])
        return self._result(execution_result)

    def execute_sync(self, request: GraphQLRequest) -> GatewayResult:
        started_at = self.clock.monotonic()
        document, rejected = self._prepare(request)
        if rejected is not None:
            return rejected
        context = self._context(document, started_at)
        try:
            execution_result = self.schema.execute_sync(
                request.query,
                variable_values=request.variables,
                context_value=context,
                operation_name=request.operation_name,
            )
        except Exception as e:
            return GatewayResult(errors=[map_exception_to_error_entry(e)])
        return self._result(execution_result)
