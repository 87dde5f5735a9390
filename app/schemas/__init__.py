"""Export Pydantic schemas for data validation and serialization."""

from app.schemas.graphql import ErrorEntry, ErrorLocation, GraphQLRequest

__all__ = [
    "ErrorEntry",
    "ErrorLocation",
    "GraphQLRequest",
]
