import importlib
import logging

from fastapi import FastAPI

log = logging.getLogger(__name__)


def setup_otel(app: FastAPI, endpoint: str | None) -> bool:
    if not endpoint:
        return False
    try:
        mod = importlib.import_module("opentelemetry.instrumentation.fastapi")
    except ImportError:
        log.warning(
            "OTEL_EXPORTER_OTLP_ENDPOINT is set but opentelemetry-instrumentation-fastapi "
            "is not installed; tracing disabled."
        )
        return False
    mod.FastAPIInstrumentor.instrument_app(app)
    log.info(f"OpenTelemetry instrumentation enabled, exporting to {endpoint}")
    return True
