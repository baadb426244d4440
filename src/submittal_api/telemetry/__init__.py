from submittal_api.telemetry.tracing import generate_trace_id
from submittal_api.telemetry.request_metrics import RequestMetrics

__all__ = ["generate_trace_id", "RequestMetrics"]
