from .system import EchoResponse, PingResponse

__all__ = [
    "EchoResponse",
    "PingResponse",
]
