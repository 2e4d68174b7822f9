"""OpenTelemetry + Prometheus bootstrap shared by the API and the Streamlit UI."""
import logging
import os

from opentelemetry import trace
from opentelemetry._logs import set_logger_provider
from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from prometheus_client import start_http_server

logger = logging.getLogger(__name__)


def configure_observability(service_name: str, metrics_port: int | None = None) -> bool:
    """
    Sends traces and logs to an OTLP collector when OTEL_EXPORTER_OTLP_*
    is configured, and exposes Prometheus metrics on `metrics_port`.

    Returns True when the OTLP exporters were installed.
    """
    if metrics_port is not None:
        _start_metrics_server(metrics_port)

    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    headers = os.getenv("OTEL_EXPORTER_OTLP_HEADERS")

    if not endpoint or not headers:
        logger.warning(
            "OTEL env vars not set. Telemetry will not be sent to a collector."
        )
        return False

    resource = Resource.create({"service.name": service_name})

    # --- Tracing ---
    trace_provider = TracerProvider(resource=resource)
    trace_provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint, headers=headers))
    )
    trace.set_tracer_provider(trace_provider)

    # --- Logs ---
    logger_provider = LoggerProvider(resource=resource)
    logger_provider.add_log_record_processor(
        BatchLogRecordProcessor(OTLPLogExporter(endpoint=endpoint, headers=headers))
    )
    set_logger_provider(logger_provider)

    handler = LoggingHandler(level=logging.INFO, logger_provider=logger_provider)
    logging.getLogger().addHandler(handler)
    return True


def _start_metrics_server(port: int) -> None:
    try:
        start_http_server(port)
        logger.info(f"Prometheus metrics server started on port {port}")
    except OSError:
        # Streamlit reruns the script; the first run already owns the port.
        logger.warning(f"Prometheus port {port} already in use. Skipping.")
