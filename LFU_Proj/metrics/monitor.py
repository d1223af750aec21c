from typing import Dict, List, Optional
from time import time
import psutil
import os

EVICTION_REASONS = ("capacity", "expired", "sweep")


class MetricsMonitor:
    def __init__(self, cpu_window_size: int = 50, keep_history: bool = True):
        """Initialize the metrics monitor.

        With keep_history=False only the counters are maintained; no per-event
        records are kept, so memory use stays flat however long the cache runs.
        """
        self.keep_history = keep_history
        self.hits: int = 0
        self.misses: int = 0
        self.operations: List[Dict] = []
        self.memory_usage: List[Dict] = []
        self.cpu_usage: List[Dict] = []
        self.process = psutil.Process(os.getpid())
        self.evictions: List[Dict] = []
        self.eviction_counts: Dict[str, int] = {reason: 0 for reason in EVICTION_REASONS}
        self.operation_count = 0
        self.cpu_window_size = cpu_window_size
        self.cpu_window_start = time()
        self.cpu_window_ops = 0

    def record_operation(self, op_type: str, key, hit: bool) -> None:
        """Record a cache lookup."""
        if hit:
            self.hits += 1
        else:
            self.misses += 1
        if not self.keep_history:
            return
        self.operations.append({
            "time": time(),
            "type": op_type,
            "key": key,
            "hit": hit,
            "total_ops": self.hits + self.misses
        })

    def record_eviction(self, reason: str, key) -> None:
        """Record an entry leaving the cache and why."""
        if reason not in self.eviction_counts:
            raise ValueError(f"Unknown eviction reason: {reason}")
        self.eviction_counts[reason] += 1
        if not self.keep_history:
            return
        self.evictions.append({
            "time": time(),
            "reason": reason,
            "key": key
        })

    def record_memory_usage(self) -> None:
        """Record current process memory usage."""
        if not self.keep_history:
            return
        memory_mb = self.process.memory_info().rss / 1024 / 1024
        self.memory_usage.append({
            "time": time(),
            "memory_mb": memory_mb
        })

    def record_cpu_usage(self) -> None:
        """Record process CPU usage, sampled once per window of operations."""
        if not self.keep_history:
            return
        self.operation_count += 1
        self.cpu_window_ops += 1

        if self.cpu_window_ops >= self.cpu_window_size:
            window_end = time()
            cpu_percent = self.process.cpu_percent(interval=None)
            cpu_per_op = cpu_percent / self.cpu_window_ops
            self.cpu_usage.append({
                "time": window_end,
                "cpu_percent": cpu_per_op
            })
            self.cpu_window_start = window_end
            self.cpu_window_ops = 0
        else:
            # Carry the last sample forward between windows
            last = self.cpu_usage[-1]["cpu_percent"] if self.cpu_usage else 0.0
            self.cpu_usage.append({
                "time": time(),
                "cpu_percent": last
            })

    def get_hit_ratio(self) -> float:
        """Calculate the current hit ratio."""
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def get_eviction_count(self, reason: Optional[str] = None) -> int:
        if reason is None:
            return sum(self.eviction_counts.values())
        return self.eviction_counts[reason]

    def reset(self) -> None:
        """Reset all metrics."""
        self.hits = 0
        self.misses = 0
        self.operations = []
        self.memory_usage = []
        self.cpu_usage = []
        self.evictions = []
        self.eviction_counts = {reason: 0 for reason in EVICTION_REASONS}
        self.operation_count = 0
        self.cpu_window_start = time()
        self.cpu_window_ops = 0

    def summary(self) -> Dict:
        """Return a summary of collected metrics."""
        return {
            "hits": self.hits,
            "misses": self.misses,
            "hit_ratio": self.get_hit_ratio(),
            "total_operations": self.hits + self.misses,
            "memory_samples": len(self.memory_usage),
            "cpu_samples": len(self.cpu_usage),
            "avg_memory_mb": sum(m["memory_mb"] for m in self.memory_usage) / (len(self.memory_usage) or 1),
            "avg_cpu_percent": sum(c["cpu_percent"] for c in self.cpu_usage) / (len(self.cpu_usage) or 1),
            "evictions": self.get_eviction_count(),
            "capacity_evictions": self.eviction_counts["capacity"],
            "expired_evictions": self.eviction_counts["expired"],
            "sweep_evictions": self.eviction_counts["sweep"]
        }
