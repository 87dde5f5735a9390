import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import ValidationError
from strawberry.fastapi import GraphQLRouter

from app.core.config import settings
from app.core.rate_limit import limiter
from app.graphql.gateway import QueryGateway
from app.graphql.schema import get_context, schema
from app.schemas.graphql import GraphQLRequest

logger = logging.getLogger(__name__)
router = APIRouter(tags=["GraphQL"])

_gateway = QueryGateway(schema)


def get_gateway() -> QueryGateway:
    return _gateway


async def parse_graphql_request(request: Request) -> GraphQLRequest:
    """Decode the JSON envelope; any malformed envelope is a 400."""
    body = await request.body()
    try:
        payload = json.loads(body)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Unable to parse request body as JSON",
        )
    if not isinstance(payload, dict):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="GraphQL request body must be a JSON object",
        )
    try:
        return GraphQLRequest.model_validate(payload)
    except ValidationError as e:
        messages = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid GraphQL request: {messages}",
        )


@router.post("/graphql")
@limiter.limit(settings.GRAPHQL_RATE_LIMIT)
async def graphql_endpoint(
    request: Request, gateway: QueryGateway = Depends(get_gateway)
) -> JSONResponse:
    graphql_request = await parse_graphql_request(request)
    result = await gateway.execute(graphql_request)
    if result.errors:
        logger.debug(
            "GraphQL request finished with errors",
            extra={
                "props": {
                    "operation_name": graphql_request.operation_name,
                    "error_count": len(result.errors),
                }
            },
        )
    return JSONResponse(result.to_dict())


@router.get("/graphiql", include_in_schema=False)
async def graphiql_redirect() -> RedirectResponse:
    return RedirectResponse(url="/graphql")


# Serves the GraphiQL page on GET /graphql. POST is handled above, so
# this router must be included after `router`.
ide_router: GraphQLRouter = GraphQLRouter(
    schema,
    context_getter=get_context,
    graphql_ide="graphiql" if settings.GRAPHQL_IDE_ENABLED else None,
    allow_queries_via_get=False,
)
