from strawberry.extensions import SchemaExtension


class PreparsedDocument(SchemaExtension):
    """Reuses a document already parsed by the caller.

    When the context carries a ``document``, strawberry skips its own parse
    step and executes that document instead.
    """

    def on_parse(self):
        document = getattr(self.execution_context.context, "document", None)
        if document is not None:
            self.execution_context.graphql_document = document
        yield
