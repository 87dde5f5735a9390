import strawberry


@strawberry.type(description="Result of the echo operation.")
class EchoResponse:
    original: str
    reversed: str
    length: int = strawberry.field(
        description="Number of code points in the message."
    )
    timestamp: str = strawberry.field(description="ISO-8601 instant of the call.")


@strawberry.type(description="Result of the ping liveness probe.")
class PingResponse:
    status: str
    latency: float = strawberry.field(
        description="Seconds between request start and the ping resolving."
    )
    timestamp: str = strawberry.field(description="ISO-8601 instant of the call.")
