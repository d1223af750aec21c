import matplotlib.pyplot as plt
from .monitor import MetricsMonitor, EVICTION_REASONS
from typing import Optional


class MetricsVisualizer:
    def __init__(self, monitor: MetricsMonitor):
        """Initialize with a MetricsMonitor instance."""
        self.monitor = monitor

    def _finish(self, output_file: Optional[str]) -> None:
        plt.grid(True)
        plt.legend()
        if output_file:
            plt.savefig(output_file)
        else:
            plt.show()
        plt.close()

    def plot_hit_miss_ratio(self, output_file: Optional[str] = None) -> None:
        """Plot the cumulative hit ratio over time."""
        operations = self.monitor.operations
        start = operations[0]["time"] if operations else 0.0
        times = [op["time"] - start for op in operations]
        hit_ratios = []
        hits = 0
        for i, op in enumerate(operations):
            hits += op["hit"]
            hit_ratios.append(hits / (i + 1))

        plt.figure(figsize=(10, 6))
        plt.plot(times, hit_ratios, label="Hit Ratio")
        plt.xlabel("Time (seconds)")
        plt.ylabel("Hit Ratio")
        plt.title("Hit Ratio Over Time")
        self._finish(output_file)

    def plot_memory_usage(self, output_file: Optional[str] = None) -> None:
        """Plot memory usage over time."""
        samples = self.monitor.memory_usage
        start = samples[0]["time"] if samples else 0.0
        times = [m["time"] - start for m in samples]
        memory = [m["memory_mb"] for m in samples]

        plt.figure(figsize=(10, 6))
        plt.plot(times, memory, label="Memory Usage (MB)")
        plt.xlabel("Time (seconds)")
        plt.ylabel("Memory Usage (MB)")
        plt.title("Memory Usage Over Time")
        self._finish(output_file)

    def plot_evictions(self, output_file: Optional[str] = None) -> None:
        """Plot cumulative evictions per cause over time."""
        evictions = self.monitor.evictions
        start = evictions[0]["time"] if evictions else 0.0

        plt.figure(figsize=(10, 6))
        for reason in EVICTION_REASONS:
            times = [e["time"] - start for e in evictions if e["reason"] == reason]
            if times:
                plt.step(times, range(1, len(times) + 1), where="post", label=f"{reason.capitalize()} Evictions")
        plt.xlabel("Time (seconds)")
        plt.ylabel("Evictions")
        plt.title("Evictions Over Time")
        self._finish(output_file)
