import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI

# OpenTelemetry Imports (Basic Setup)
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from fastapi.middleware.cors import CORSMiddleware

from app.auth import SecurityMiddleware, get_required_principal
from app.core.config import settings
from app.core.rate_limit import limiter
from app.database import dispose_engine
from app.graphql.router import ide_router
from app.graphql.router import router as graphql_router
from app.logging_config import setup_logging

# Call setup_logging early, before creating app or loggers
setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


def setup_opentelemetry(app: FastAPI):
    if settings.OPENTELEMETRY_ENABLED:
        logger.info("Setting up OpenTelemetry")
        resource = Resource(attributes={SERVICE_NAME: settings.OTEL_SERVICE_NAME})

        provider = TracerProvider(resource=resource)
        trace.set_tracer_provider(provider)

        if settings.OTEL_EXPORTER_OTLP_ENDPOINT:
            endpoint = settings.OTEL_EXPORTER_OTLP_ENDPOINT
            logger.info(f"Configuring OTLP Exporter to: {endpoint}/v1/traces")
            try:
                exporter = OTLPSpanExporter(endpoint=f"{endpoint.strip('/')}/v1/traces")
                provider.add_span_processor(BatchSpanProcessor(exporter))
            except Exception as e:
                logger.error(f"Failed to initialize OTLP Exporter: {e}. Falling back to Console Exporter.")
                provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        else:
            logger.warning("OTEL_EXPORTER_OTLP_ENDPOINT not set. Defaulting to ConsoleSpanExporter.")
            provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

        FastAPIInstrumentor.instrument_app(app)
        logger.info("OpenTelemetry setup complete.")
    else:
        logger.info("OpenTelemetry tracing is disabled via OPENTELEMETRY_ENABLED setting.")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_opentelemetry(app)
    logger.info("Application startup complete.")
    yield
    await dispose_engine()
    logger.info("Application shutdown.")


app = FastAPI(lifespan=lifespan)

# --- Add Middleware ---
# Added last, so CORS runs first and answers preflight requests
app.add_middleware(SecurityMiddleware, settings=settings)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Rate limiter state and 429 handler
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# --- Mount Routers ---
# POST /graphql is served by the gateway route; the strawberry router only
# answers GET /graphql with the GraphiQL page.
app.include_router(graphql_router)
app.include_router(ide_router, prefix="/graphql", include_in_schema=False)


@app.get("/")
async def read_root(principal: str = Depends(get_required_principal)):
    logger.info("Root endpoint called")
    return {"message": "Query Gateway", "principal": principal}


@app.get("/health", dependencies=[Depends(get_required_principal)])
async def health_check():
    logger.debug("Health check endpoint called")
    return {"status": "ok"}


if __name__ == "__main__":
    # uvicorn command is used in deployments
    import uvicorn

    logger.info("Starting Uvicorn directly for local testing")
    uvicorn.run(app, host="0.0.0.0", port=8000)
