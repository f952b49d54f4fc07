"""
In-memory metrics for /metrics endpoint (rough p50/p95 + token spend).
Why: quick visibility into latency and model cost without Prometheus.
"""

from typing import Dict, List

from .schemas import TokenUsage


def _percentile(values: List[int], p: float) -> int:
    if not values:
        return 0
    idx = max(0, min(len(values) - 1, int(len(values) * p)))
    return sorted(values)[idx]


class _Metrics:
    def __init__(self, max_samples: int = 1000) -> None:
        self.total_requests = 0
        self.total_errors = 0
        self.prompt_tokens = 0
        self.response_tokens = 0
        self.total_tokens = 0
        self._max_samples = max_samples
        self._latencies: List[int] = []

    def increment_requests(self) -> None:
        self.total_requests += 1

    def increment_errors(self) -> None:
        self.total_errors += 1

    def record_latency(self, ms: int) -> None:
        self._latencies.append(ms)
        if len(self._latencies) > self._max_samples:
            del self._latencies[0]

    def record_tokens(self, usage: TokenUsage) -> None:
        self.prompt_tokens += usage.prompt_tokens
        self.response_tokens += usage.response_tokens
        self.total_tokens += usage.total_tokens

    def snapshot(self) -> Dict[str, int]:
        lat = list(self._latencies)
        return {
            "total_requests": self.total_requests,
            "total_errors": self.total_errors,
            "p50_ms": _percentile(lat, 0.50),
            "p95_ms": _percentile(lat, 0.95),
            "prompt_tokens": self.prompt_tokens,
            "response_tokens": self.response_tokens,
            "total_tokens": self.total_tokens,
        }


metrics = _Metrics()
