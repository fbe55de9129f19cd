# app/core/metrics.py
"""
In-process cache hit/miss counters.

Counters are plain integers updated from the event loop; they reset on restart
and are per process, which is all the metrics endpoint promises.
"""
from typing import Callable, Dict


class CacheMetrics:
    def __init__(self):
        self.hits = 0
        self.misses = 0

    def record_hit(self) -> None:
        self.hits += 1

    def record_miss(self) -> None:
        self.misses += 1

    def snapshot(self) -> dict:
        total = self.hits + self.misses
        hit_rate = (self.hits / total) * 100 if total > 0 else 0.0
        return {
            "hits": self.hits,
            "misses": self.misses,
            "total": total,
            "hitRate": f"{hit_rate:.2f}",
        }


class CacheMetricsRegistry:
    """Named metric sources aggregated for the metrics endpoint"""

    def __init__(self):
        self._sources: Dict[str, Callable[[], dict]] = {}

    def register(self, service_name: str, metrics: CacheMetrics) -> None:
        self._sources[service_name] = metrics.snapshot

    def aggregate(self) -> dict:
        services = {name: get_snapshot() for name, get_snapshot in self._sources.items()}
        hits = sum(s["hits"] for s in services.values())
        misses = sum(s["misses"] for s in services.values())
        total = hits + misses
        hit_rate = (hits / total) * 100 if total > 0 else 0.0
        return {
            "services": services,
            "overall": {
                "hits": hits,
                "misses": misses,
                "total": total,
                "hitRate": f"{hit_rate:.2f}",
            },
        }
