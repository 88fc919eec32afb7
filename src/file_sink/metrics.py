"""
Prometheus metrics for file sink stages.

Metrics live in the global prometheus_client REGISTRY; importing this module
registers them once per process.
"""

from prometheus_client import Counter, Gauge, Histogram

FILE_SINK_WRITES_TOTAL = Counter(
    "file_sink_writes_total",
    "Total number of messages handled by file sink stages",
    ["stage", "status"],
)

FILE_SINK_ERRORS_TOTAL = Counter(
    "file_sink_errors_total",
    "Error reports emitted by file sink stages",
    ["stage", "kind"],
)

FILE_SINK_BYTES_WRITTEN = Counter(
    "file_sink_bytes_written_total",
    "Bytes written to disk by file sink stages",
    ["stage"],
)

FILE_SINK_WRITE_LATENCY = Histogram(
    "file_sink_write_latency_seconds",
    "Time spent streaming one payload to disk",
    ["stage"],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10],
)

FILE_SINK_IN_FLIGHT = Gauge(
    "file_sink_in_flight",
    "Writes currently streaming",
    ["stage"],
)


class MetricsRegistry:
    """Structured access to the file sink metrics."""

    writes_total = FILE_SINK_WRITES_TOTAL
    errors_total = FILE_SINK_ERRORS_TOTAL
    bytes_written = FILE_SINK_BYTES_WRITTEN
    write_latency = FILE_SINK_WRITE_LATENCY
    in_flight = FILE_SINK_IN_FLIGHT


# Singleton instance
metrics_registry = MetricsRegistry()
