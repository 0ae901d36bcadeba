"""OpenTelemetry リクエストメトリクス定義"""

from __future__ import annotations

from opentelemetry import metrics

_meter = metrics.get_meter("kiosk_api", version="0.1.0")

request_total = _meter.create_counter(
    name="kiosk_request_total",
    description="Total number of API requests by endpoint and status",
    unit="1",
)

request_errors_total = _meter.create_counter(
    name="kiosk_request_errors_total",
    description="Total number of failed API requests by endpoint and error code",
    unit="1",
)
