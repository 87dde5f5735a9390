"""Pure operation handlers.

Handlers take their bound arguments plus an injected clock and return a fresh
result object. They hold no state between calls.
"""

from app.core.clock import Clock, isoformat_utc
from app.graphql.types.system import EchoResponse, PingResponse

PONG = "pong"


def echo(message: str, clock: Clock) -> EchoResponse:
    # Python strings iterate by code point; reversal and length share that unit.
    return EchoResponse(
        original=message,
        reversed=message[::-1],
        length=len(message),
        timestamp=isoformat_utc(clock.now()),
    )


def ping(clock: Clock, started_at: float) -> PingResponse:
    latency = max(0.0, clock.monotonic() - started_at)
    return PingResponse(
        status=PONG,
        latency=latency,
        timestamp=isoformat_utc(clock.now()),
    )
