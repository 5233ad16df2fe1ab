"""Prometheus metrics instrumentation.

HTTP request metrics come from prometheus-fastapi-instrumentator; import
outcomes are counted with plain prometheus_client collectors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from prometheus_client import Counter, Histogram
from prometheus_fastapi_instrumentator import Instrumentator, metrics

from recipe_catalog.core.logging import get_logger


if TYPE_CHECKING:
    from fastapi import FastAPI

    from recipe_catalog.core.config import Settings


logger = get_logger(__name__)

METRIC_NAMESPACE = "recipe_catalog"

IMPORTS_TOTAL = Counter(
    "imports_total",
    "Recipe import attempts by source type and outcome",
    ["source_type", "outcome"],
    namespace=METRIC_NAMESPACE,
)

IMPORT_DURATION = Histogram(
    "import_duration_seconds",
    "Time spent producing a recipe from an import request",
    ["source_type"],
    namespace=METRIC_NAMESPACE,
    buckets=(0.5, 1, 2.5, 5, 10, 20, 40, 60, 120, 300),
)


def record_import(source_type: str, outcome: str, duration: float) -> None:
    """Record one finished import attempt."""
    IMPORTS_TOTAL.labels(source_type=source_type, outcome=outcome).inc()
    IMPORT_DURATION.labels(source_type=source_type).observe(duration)


def setup_metrics(app: FastAPI, settings: Settings) -> Instrumentator | None:
    """Instrument the app and expose ``{prefix}/metrics``.

    Returns:
        The configured Instrumentator, or None when metrics are disabled.
    """
    if not settings.metrics.enabled:
        logger.info("Metrics collection disabled")
        return None

    prefix = settings.api.prefix
    instrumentator = Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        should_instrument_requests_inprogress=True,
        excluded_handlers=[
            f"{prefix}/health",
            f"{prefix}/metrics",
            "/openapi.json",
            "/docs",
        ],
        inprogress_name="http_requests_inprogress",
        inprogress_labels=True,
    )
    instrumentator.add(
        metrics.default(
            metric_namespace=METRIC_NAMESPACE,
            metric_subsystem="http",
        )
    )
    instrumentator.instrument(app)

    endpoint = f"{prefix}/metrics"
    instrumentator.expose(app, endpoint=endpoint, include_in_schema=True, tags=["Monitoring"])
    logger.info("Prometheus metrics configured", endpoint=endpoint)
    return instrumentator
