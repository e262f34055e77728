"""Monitoring and observability setup.

Tracing and metrics providers are always installed so that spans and
instruments work the same way in every environment. OTLP exporters are only
attached when ``OTEL_EXPORTER_OTLP_ENDPOINT`` is set; without one, spans still
carry trace ids into the structured logs and metric readings stay in process.

Exemplars are attached automatically to histograms recorded inside an active
span (OpenTelemetry Python SDK 1.28.0+), so ``checkout_amount_histogram``
links order totals back to the checkout trace that produced them.
"""
import logging
from opentelemetry import trace, metrics
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter

from config import OTEL_EXPORTER_OTLP_ENDPOINT, SERVICE_NAME

logger = logging.getLogger(__name__)


def init_tracing() -> trace.Tracer:
    """
    Initialize OpenTelemetry tracing.

    Returns:
        Tracer instance
    """
    resource = Resource.create({"service.name": SERVICE_NAME})

    tracer_provider = TracerProvider(resource=resource)
    if OTEL_EXPORTER_OTLP_ENDPOINT:
        otlp_span_exporter = OTLPSpanExporter(
            endpoint=OTEL_EXPORTER_OTLP_ENDPOINT,
            insecure=True
        )
        tracer_provider.add_span_processor(BatchSpanProcessor(otlp_span_exporter))
        logger.info(f"Tracing initialized with endpoint: {OTEL_EXPORTER_OTLP_ENDPOINT}")
    trace.set_tracer_provider(tracer_provider)

    return trace.get_tracer(__name__)


def init_metrics() -> metrics.Meter:
    """
    Initialize OpenTelemetry metrics.

    Returns:
        Meter instance
    """
    resource = Resource.create({"service.name": SERVICE_NAME})

    metric_readers = []
    if OTEL_EXPORTER_OTLP_ENDPOINT:
        otlp_metric_exporter = OTLPMetricExporter(
            endpoint=OTEL_EXPORTER_OTLP_ENDPOINT,
            insecure=True
        )
        metric_readers.append(PeriodicExportingMetricReader(
            otlp_metric_exporter,
            export_interval_millis=5000
        ))
        logger.info("Metrics initialized with OTLP exporter")

    meter_provider = MeterProvider(
        resource=resource,
        metric_readers=metric_readers
    )
    metrics.set_meter_provider(meter_provider)

    return metrics.get_meter(__name__)


# Initialize tracer and meter
tracer = init_tracing()
meter = init_metrics()

# Business metrics using OpenTelemetry

# Catalog metrics
product_views_counter = meter.create_counter(
    "storefront.products.views",
    description="Total number of product catalog and detail views",
    unit="1"
)

# Checkout metrics
checkout_counter = meter.create_counter(
    "storefront.checkouts",
    description="Total number of checkouts by outcome and payment method",
    unit="1"
)

checkout_rejections_counter = meter.create_counter(
    "storefront.checkout.rejections",
    description="Checkouts rejected before any order was written, by reason",
    unit="1"
)

checkout_amount_histogram = meter.create_histogram(
    "storefront.checkout.amount",
    description="Server-computed order total in USD",
    unit="USD"
)

# Admin metrics
settings_updates_counter = meter.create_counter(
    "storefront.settings.updates",
    description="Total number of settings documents written",
    unit="1"
)

# Security monitoring metrics
auth_failures_counter = meter.create_counter(
    "storefront.auth.failures",
    description="Total number of authentication failures",
    unit="1"
)

auth_attempts_counter = meter.create_counter(
    "storefront.auth.attempts",
    description="Total number of authentication attempts",
    unit="1"
)

rate_limit_exceeded_counter = meter.create_counter(
    "storefront.rate_limit.exceeded",
    description="Total number of rate limit violations",
    unit="1"
)
