"""
Prometheus metrics for the grocery API.

HTTP traffic is recorded per route template (``/orders/<int:order_id>``), not
per concrete URL, to keep label cardinality bounded. Order and stock counters
are incremented only after the owning transaction has committed.
The /metrics endpoint is unauthenticated; expose it on the internal network only.
"""
import os
import time
from flask import Blueprint, Response, request, g
from prometheus_client import (
    Counter, Histogram, Gauge, CollectorRegistry, REGISTRY, CONTENT_TYPE_LATEST, generate_latest, multiprocess
)

metrics_bp = Blueprint('metrics', __name__)

# Gunicorn workers share counters through PROMETHEUS_MULTIPROC_DIR
MULTIPROCESS_MODE = os.environ.get('PROMETHEUS_MULTIPROC_DIR') is not None

if MULTIPROCESS_MODE:
    registry = CollectorRegistry()
    multiprocess.MultiProcessCollector(registry)
    _metric_registry = None
else:
    registry = REGISTRY
    _metric_registry = REGISTRY

# HTTP
http_requests_total = Counter(
    'http_requests_total',
    'HTTP requests by route and status',
    ['method', 'route', 'http_status'],
    registry=_metric_registry
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request latency in seconds',
    ['method', 'route'],
    registry=_metric_registry,
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0)
)

http_requests_in_flight = Gauge(
    'http_requests_in_flight',
    'Requests currently being served',
    registry=_metric_registry,
    multiprocess_mode='livesum'
)

# Orders and stock
orders_created_total = Counter(
    'grocery_orders_created_total',
    'Orders placed successfully',
    ['payment_method'],
    registry=_metric_registry
)

order_failures_total = Counter(
    'grocery_order_failures_total',
    'Order placements rejected, by error type',
    ['reason'],
    registry=_metric_registry
)

orders_cancelled_total = Counter(
    'grocery_orders_cancelled_total',
    'Orders cancelled with stock restored',
    registry=_metric_registry
)

stock_outs_total = Counter(
    'grocery_stock_outs_total',
    'Decrements that left a product with zero stock',
    registry=_metric_registry
)


def _route_label():
    if request.url_rule is not None:
        return request.url_rule.rule
    return 'unmatched'


def setup_metrics_instrumentation(app):
    """Register request hooks that time and count every request except /metrics."""

    @app.before_request
    def start_request_timer():
        if request.endpoint == 'metrics.metrics':
            return
        g._metrics_started_at = time.perf_counter()
        http_requests_in_flight.inc()

    @app.after_request
    def record_request(response):
        started_at = g.pop('_metrics_started_at', None)
        if started_at is None:
            return response

        try:
            route = _route_label()
            http_request_duration_seconds.labels(method=request.method, route=route).observe(
                time.perf_counter() - started_at
            )
            http_requests_total.labels(
                method=request.method, route=route, http_status=response.status_code
            ).inc()
        except Exception as e:
            # Metrics must never break a response
            app.logger.warning(f"Failed to record metrics: {e}")
        finally:
            http_requests_in_flight.dec()

        return response


@metrics_bp.route('/metrics')
def metrics():
    """Prometheus text exposition of every registered metric."""
    return Response(generate_latest(registry), mimetype=CONTENT_TYPE_LATEST)
