"""Query gateway service exposing the `echo` and `ping` GraphQL operations."""
