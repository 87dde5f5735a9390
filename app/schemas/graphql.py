from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator


def _ensure_encodable(value: Any) -> None:
    """Raise ValueError when any string in value cannot be encoded as UTF-8."""
    if isinstance(value, str):
        try:
            value.encode("utf-8")
        except UnicodeEncodeError:
            # The offending text is left out so the 400 body stays encodable
            raise ValueError("text contains characters that are not valid UTF-8")
    elif isinstance(value, dict):
        for key, item in value.items():
            _ensure_encodable(key)
            _ensure_encodable(item)
    elif isinstance(value, list):
        for item in value:
            _ensure_encodable(item)


# JSON envelope accepted by the GraphQL endpoint
class GraphQLRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    query: StrictStr
    operation_name: StrictStr | None = Field(default=None, alias="operationName")
    variables: dict[str, Any] | None = None

    @field_validator("query", "operation_name", "variables")
    @classmethod
    def check_utf8(cls, value: Any) -> Any:
        _ensure_encodable(value)
        return value


class ErrorLocation(BaseModel):
    line: int
    column: int


# One entry of the response's `errors` list
class ErrorEntry(BaseModel):
    message: str
    locations: list[ErrorLocation] | None = None
    path: list[str | int] | None = None
    extensions: dict[str, Any] | None = None
