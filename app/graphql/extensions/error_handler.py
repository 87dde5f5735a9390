import logging
from typing import Any

import strawberry
from graphql import GraphQLError
from strawberry.extensions import SchemaExtension

from app.core.exceptions import (
    AuthenticationError,
    InputValidationError,
    PermissionDeniedError,
)

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "An unexpected error occurred."


class CustomErrorHandler(SchemaExtension):
    """Converts resolver exceptions into client-safe GraphQL errors.

    The original exception is logged and never reaches the client. graphql-core
    attaches the failing field path, so one failing field leaves its siblings'
    data intact.
    """

    def on_execute(self):
        logger.debug("GraphQL execution starting...")
        yield
        logger.debug("GraphQL execution finished.")

    def resolve(self, _next, root, info: strawberry.Info, *args, **kwargs):
        try:
            return _next(root, info, *args, **kwargs)
        except GraphQLError:
            raise
        except InputValidationError as e:
            logger.warning(
                f"Invalid input in resolver '{info.field_name}': {e.message}",
                extra={"props": {"field": e.field, "path": info.path.as_list()}},
            )
            extensions = self.format_as_user_error(
                message=e.message, code="BAD_USER_INPUT", field=e.field
            )
            if e.errors:
                extensions["arguments"] = dict(e.errors)
            raise GraphQLError(message=e.message, extensions=extensions) from e
        except AuthenticationError as e:
            logger.warning(f"AuthenticationError in resolver '{info.field_name}': {e}")
            raise GraphQLError(
                message=e.message,
                extensions=self.format_as_user_error(
                    message=e.message, code="AUTHENTICATION_ERROR"
                ),
            ) from e
        except PermissionDeniedError as e:
            logger.warning(f"PermissionDeniedError in resolver '{info.field_name}': {e}")
            raise GraphQLError(
                message=e.message,
                extensions=self.format_as_user_error(
                    message=e.message, code="PERMISSION_DENIED"
                ),
            ) from e
        except ValueError as e:
            logger.warning(f"ValueError in resolver '{info.field_name}': {e}")
            raise GraphQLError(
                message=str(e),
                extensions=self.format_as_user_error(
                    message=str(e), code="VALIDATION_ERROR"
                ),
            ) from e
        except Exception as e:
            # Catch-all for handler faults
            logger.error(
                f"Unexpected Exception in resolver '{info.field_name}': {e}",
                exc_info=True,
                extra={"props": {"path": info.path.as_list()}},
            )
            raise GraphQLError(
                message=GENERIC_MESSAGE,
                extensions=self.format_as_user_error(
                    message=GENERIC_MESSAGE, code="INTERNAL_SERVER_ERROR"
                ),
            ) from e

    def format_as_user_error(
        self, message: str, code: str, field: str | None = None
    ) -> dict[str, Any]:
        """Structure carried in the error's ``extensions``."""
        extensions: dict[str, Any] = {"code": code, "message": message}
        if field:
            extensions["field"] = field
        return extensions
