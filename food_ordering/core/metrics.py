from __future__ import annotations

from dataclasses import dataclass, field
from threading import Lock


@dataclass
class EndpointMetric:
    total_requests: int = 0
    total_duration_ms: float = 0.0
    client_errors: int = 0
    server_errors: int = 0
    max_duration_ms: float = 0.0
    status_counts: dict[int, int] = field(default_factory=dict)


class RequestMetrics:
    """Per-endpoint request counters kept in process memory."""

    def __init__(self) -> None:
        self._metrics: dict[tuple[str, str], EndpointMetric] = {}
        self._lock = Lock()

    def observe(self, endpoint: str, method: str, status_code: int, duration_ms: float) -> None:
        key = (endpoint, method)
        with self._lock:
            metric = self._metrics.setdefault(key, EndpointMetric())
            metric.total_requests += 1
            metric.total_duration_ms += duration_ms
            metric.max_duration_ms = max(metric.max_duration_ms, duration_ms)
            metric.status_counts[status_code] = metric.status_counts.get(status_code, 0) + 1
            if status_code >= 500:
                metric.server_errors += 1
            elif status_code >= 400:
                metric.client_errors += 1

    def snapshot(self) -> dict[str, dict[str, float | int | dict[str, int]]]:
        with self._lock:
            result: dict[str, dict[str, float | int | dict[str, int]]] = {}
            for (endpoint, method), metric in sorted(self._metrics.items()):
                avg = metric.total_duration_ms / metric.total_requests if metric.total_requests else 0.0
                result[f"{method} {endpoint}"] = {
                    "total_requests": metric.total_requests,
                    "avg_duration_ms": round(avg, 2),
                    "max_duration_ms": round(metric.max_duration_ms, 2),
                    "client_errors": metric.client_errors,
                    "server_errors": metric.server_errors,
                    "status_counts": {str(code): count for code, count in sorted(metric.status_counts.items())},
                }
            return result

    def reset(self) -> None:
        with self._lock:
            self._metrics.clear()


request_metrics = RequestMetrics()
