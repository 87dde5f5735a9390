from strawberry.types import Info

from app.graphql.types.system import EchoResponse, PingResponse


# Function names double as the root field names.
def echo(info: Info, message: str) -> EchoResponse | None:
    operation = info.context.operations.get("echo")
    return operation.invoke(info.context, {"message": message})


def ping(info: Info) -> PingResponse | None:
    operation = info.context.operations.get("ping")
    return operation.invoke(info.context, {})
