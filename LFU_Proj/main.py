from lfu_cache.lfu_ttl_cache import LFUTTLCache
from lfu_cache.clock import ManualClock
from config import CONFIG
from workload.synthetic_generator import WorkloadGenerator
from metrics.visualizer import MetricsVisualizer
from metrics.excel_logger import ExcelLogger
from metrics.monitor import MetricsMonitor
from benchmarks.lru import LRUCache
from benchmarks.lfu import LFUCacheWrapper
from benchmarks.ttl import TTLCacheWrapper
from benchmarks.fifo import FIFOCache
import logging
import psutil
import os
import time
import gc
import sys
import json

logger = logging.getLogger(__name__)

CACHE_NAMES = ["LFU-TTL", "LRU", "LFU", "TTL", "FIFO"]


def demo(clock=None, file=None) -> LFUTTLCache:
    """Small walk-through of LFU eviction followed by an age sweep."""
    settings = CONFIG["demo"]
    cache = LFUTTLCache(settings["capacity"], settings["ttl_ms"], clock=clock)

    cache.put("one", 1)
    cache.put("two", 2)
    cache.put("three", 3)

    # Every entry read once, so all frequencies tie at 2
    cache.get("one")
    cache.get("two")
    cache.get("three")

    # Full cache: "one" is the earliest inserted of the tied entries
    cache.put("four", 4)

    cache.print_cache_contents(file=file)
    print(f"After invalidating entries older than {settings['sweep_age_ms']} milliseconds:", file=file)
    cache.invalidate_after_time(settings["sweep_age_ms"])
    cache.print_cache_contents(file=file)
    return cache


def build_cache(cache_name: str, cache_size: int, ttl_ms: float, clock=None):
    if cache_name == "LFU-TTL":
        return LFUTTLCache(cache_size, ttl_ms, clock=clock, monitor=MetricsMonitor())
    elif cache_name == "LRU":
        return LRUCache(max_size=cache_size)
    elif cache_name == "LFU":
        return LFUCacheWrapper(max_size=cache_size)
    elif cache_name == "TTL":
        return TTLCacheWrapper(max_size=cache_size, ttl_ms=ttl_ms, clock=clock)
    elif cache_name == "FIFO":
        return FIFOCache(max_size=cache_size)
    raise ValueError(f"Unknown cache type: {cache_name}")


def build_workloads(gen: WorkloadGenerator, settings: dict) -> dict:
    return {
        "Uniform": lambda: gen.generate_uniform_workload(),
        "Zipf": lambda: gen.generate_zipf_workload(alpha=settings["zipf_alpha"]),
        "Bursty": lambda: gen.generate_bursty_workload(burst_size=settings["burst_size"],
                                                       burst_freq=settings["burst_freq"]),
        "Phase": lambda: gen.generate_phase_workload(phase_length=settings["phase_length"],
                                                     num_phases=settings["num_phases"])
    }


def run_workload(cache, workload: list[tuple[str, str]], cache_name: str, workload_name: str,
                 clock: ManualClock = None, excel_logger: ExcelLogger = None) -> dict:
    """Replay a workload read-through style: get, and put only on a miss."""
    settings = CONFIG["benchmark"]
    window_size = settings["cpu_window_size"]
    process = psutil.Process(os.getpid())

    cache.reset()
    gc.collect()

    start_time = time.perf_counter()
    prev_cpu_time = process.cpu_times().user + process.cpu_times().system
    prev_wall_time = start_time
    cpu_percent_window = []
    last_cpu_percent = 0.0

    for step, (key, value) in enumerate(workload):
        if clock is not None:
            clock.advance(settings["tick_ms"])

        if cache.get(key) is None:
            cache.put(key, value)

        cache.monitor.record_memory_usage()
        cache.monitor.record_cpu_usage()

        if excel_logger is None:
            continue

        current_memory = process.memory_info().rss / (1024 * 1024)
        wall_time_now = time.perf_counter()
        cpu_time_now = process.cpu_times().user + process.cpu_times().system
        delta_wall = wall_time_now - prev_wall_time
        cpu_percent = ((cpu_time_now - prev_cpu_time) / delta_wall) * 100 if delta_wall > 0 else 0.0
        cpu_percent_window.append(cpu_percent)
        prev_cpu_time = cpu_time_now
        prev_wall_time = wall_time_now

        # Average CPU once per window, repeat the last average in between
        if (step + 1) % window_size == 0 or (step + 1) == len(workload):
            last_cpu_percent = sum(cpu_percent_window) / len(cpu_percent_window)
            cpu_percent_window = []

        monitor = cache.monitor
        excel_logger.log(
            step=step,
            hit_rate=monitor.get_hit_ratio(),
            hits=monitor.hits,
            misses=monitor.misses,
            memory_mb=current_memory,
            cpu_time_delta=last_cpu_percent,
            timestamp=wall_time_now - start_time,
            size=len(cache),
            cache_name=cache_name,
            workload_name=workload_name,
            capacity_evictions=monitor.get_eviction_count("capacity"),
            expired_evictions=monitor.get_eviction_count("expired"),
            sweep_evictions=monitor.get_eviction_count("sweep")
        )

    summary = cache.summary()
    summary["size"] = len(cache)
    summary["seconds"] = time.perf_counter() - start_time

    plot_dir = settings["plot_dir"]
    if plot_dir and isinstance(cache, LFUTTLCache):
        os.makedirs(plot_dir, exist_ok=True)
        visualizer = MetricsVisualizer(cache.monitor)
        prefix = os.path.join(plot_dir, f"{cache_name}_{workload_name}")
        visualizer.plot_hit_miss_ratio(f"{prefix}_hit_ratio.png")
        visualizer.plot_memory_usage(f"{prefix}_memory.png")
        visualizer.plot_evictions(f"{prefix}_evictions.png")

    print(f"{cache_name} with {workload_name} - {summary}")
    return summary


def main():
    workload_settings = CONFIG["workload"]
    clock = ManualClock()
    caches = [(name, build_cache(name, CONFIG["cache_size"], CONFIG["ttl_ms"], clock=clock))
              for name in CACHE_NAMES]

    gen = WorkloadGenerator(key_space_size=workload_settings["key_space_size"],
                            num_requests=workload_settings["num_requests"],
                            seed=workload_settings["seed"])
    workloads = build_workloads(gen, workload_settings)
    excel_logger = ExcelLogger(filename=CONFIG["benchmark"]["excel_filename"])

    for cache_name, cache in caches:
        for workload_name, generate_workload in workloads.items():
            run_workload(cache, generate_workload(), cache_name, workload_name,
                         clock=clock, excel_logger=excel_logger)
        print("----------------------------------------------------------------------------------")
    excel_logger.export()
    logger.info("Exported metrics to %s", excel_logger.filename)


def main_single(cache_name: str, workload_name: str) -> dict:
    workload_settings = CONFIG["workload"]
    clock = ManualClock()
    cache = build_cache(cache_name, CONFIG["cache_size"], CONFIG["ttl_ms"], clock=clock)

    gen = WorkloadGenerator(key_space_size=workload_settings["key_space_size"],
                            num_requests=workload_settings["num_requests"],
                            seed=workload_settings["seed"])
    workloads = build_workloads(gen, workload_settings)
    if workload_name not in workloads:
        raise ValueError(f"Unknown workload: {workload_name}")

    excel_logger = ExcelLogger(filename=CONFIG["benchmark"]["excel_filename"], overwrite=False)
    summary = run_workload(cache, workloads[workload_name](), cache_name, workload_name,
                           clock=clock, excel_logger=excel_logger)
    excel_logger.export()
    return summary


def run_single_test(config_path: str) -> dict:
    """Run a single test with the given configuration."""
    with open(config_path, 'r') as f:
        config = json.load(f)

    clock = ManualClock()
    cache = build_cache(config["cache_name"], config["cache_size"],
                        config.get("ttl_ms", CONFIG["ttl_ms"]), clock=clock)
    workload = [tuple(request) for request in config["workload_data"]]

    return run_workload(cache, workload, config["cache_name"], config["workload_name"], clock=clock)


if __name__ == "__main__":
    logging.basicConfig(level=CONFIG["log_level"])

    if len(sys.argv) == 2 and sys.argv[1] == "demo":
        demo()
    elif len(sys.argv) == 2 and sys.argv[1] == "benchmark":
        main()
    elif len(sys.argv) == 4 and sys.argv[1] == "benchmark":
        main_single(sys.argv[2], sys.argv[3])
    elif len(sys.argv) == 2:
        run_single_test(sys.argv[1])
    else:
        print("Usage: python main.py demo | benchmark [<cache> <workload>] | <config_file>")
        sys.exit(1)
