import pytest
from fastapi import FastAPI

from app import main
from app.core.config import settings
from app.graphql.schema import Context, get_context


@pytest.fixture
def mock_otel(mocker):
    """Patch the OpenTelemetry globals touched by setup_opentelemetry."""
    return {
        "set_provider": mocker.patch.object(main.trace, "set_tracer_provider"),
        "instrument": mocker.patch.object(main.FastAPIInstrumentor, "instrument_app"),
        "otlp": mocker.patch.object(main, "OTLPSpanExporter"),
        "processor": mocker.patch.object(main, "BatchSpanProcessor"),
    }


def test_opentelemetry_disabled_by_default(mock_otel, mocker):
    mocker.patch.object(settings, "OPENTELEMETRY_ENABLED", False)

    main.setup_opentelemetry(FastAPI())

    mock_otel["set_provider"].assert_not_called()
    mock_otel["instrument"].assert_not_called()


def test_opentelemetry_uses_otlp_exporter_when_endpoint_set(mock_otel, mocker):
    mocker.patch.object(settings, "OPENTELEMETRY_ENABLED", True)
    mocker.patch.object(settings, "OTEL_EXPORTER_OTLP_ENDPOINT", "http://collector:4318/")
    app = FastAPI()

    main.setup_opentelemetry(app)

    mock_otel["otlp"].assert_called_once_with(endpoint="http://collector:4318/v1/traces")
    mock_otel["set_provider"].assert_called_once()
    mock_otel["instrument"].assert_called_once_with(app)


def test_opentelemetry_falls_back_to_console_exporter(mock_otel, mocker):
    mocker.patch.object(settings, "OPENTELEMETRY_ENABLED", True)
    mocker.patch.object(settings, "OTEL_EXPORTER_OTLP_ENDPOINT", None)
    console = mocker.patch.object(main, "ConsoleSpanExporter")

    main.setup_opentelemetry(FastAPI())

    mock_otel["otlp"].assert_not_called()
    console.assert_called_once_with()


@pytest.mark.asyncio
async def test_get_context_builds_request_context():
    context = await get_context()

    assert isinstance(context, Context)
    assert set(context.operations) == {"echo", "ping"}
    assert context.started_at <= context.clock.monotonic()
