"""The process-wide operation table: ``echo`` and ``ping``."""

from app.graphql import handlers
from app.graphql.registry import ArgumentSpec, Operation, OperationRegistry, ValueKind
from app.graphql.resolvers import system
from app.graphql.types.system import EchoResponse, PingResponse

registry = OperationRegistry()

registry.register(
    Operation(
        name="echo",
        resolver=system.echo,
        handler=handlers.echo,
        result_type=EchoResponse,
        arguments=(ArgumentSpec("message", ValueKind.STRING),),
        context_params=("clock",),
        description="Returns the message, its reversal and its length.",
    )
)
registry.register(
    Operation(
        name="ping",
        resolver=system.ping,
        handler=handlers.ping,
        result_type=PingResponse,
        context_params=("clock", "started_at"),
        description="Liveness probe.",
    )
)

OPERATIONS = registry.freeze()
