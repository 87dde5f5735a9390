from graphql import GraphQLError, parse

from app.graphql.errors import (
    error_entry,
    format_graphql_error,
    map_exception_to_error_entry,
)
from app.graphql.extensions.error_handler import CustomErrorHandler


def test_format_graphql_error_includes_locations_and_path():
    document = parse("{ echo(message: 1) { original } }")
    field_node = document.definitions[0].selection_set.selections[0]
    error = GraphQLError(
        "bad", nodes=[field_node], path=["echo"], extensions={"code": "X"}
    )

    assert format_graphql_error(error) == {
        "message": "bad",
        "locations": [{"line": 1, "column": 3}],
        "path": ["echo"],
        "extensions": {"code": "X"},
    }


def test_format_graphql_error_without_extensions_omits_the_key():
    formatted = format_graphql_error(GraphQLError("plain"))

    assert formatted == {"message": "plain", "locations": None, "path": None}


def test_error_entry_carries_code():
    assert error_entry("nope", code="BAD_REQUEST")["extensions"] == {"code": "BAD_REQUEST"}


def test_unexpected_exception_maps_to_generic_entry():
    try:
        raise RuntimeError("secret internals")
    except RuntimeError as e:
        entry = map_exception_to_error_entry(e)

    assert entry["message"] == "An unexpected error occurred."
    assert entry["extensions"]["code"] == "INTERNAL_SERVER_ERROR"


def test_graphql_error_passes_through_mapping():
    entry = map_exception_to_error_entry(GraphQLError("visible"))

    assert entry["message"] == "visible"


def test_format_as_user_error_adds_field_only_when_given():
    handler = CustomErrorHandler()

    assert handler.format_as_user_error("m", "CODE") == {"code": "CODE", "message": "m"}
    assert handler.format_as_user_error("m", "CODE", field="f")["field"] == "f"
