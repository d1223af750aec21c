CONFIG = {
    # Total number of items the cache can hold
    "cache_size": 500,

    # Entries older than this are treated as expired on read (milliseconds)
    "ttl_ms": 5000,

    # Level for the cache's own debug/info logging
    "log_level": "WARNING",

    # Demonstration run: small cache, then a sweep with a shorter max age
    "demo": {
        "capacity": 3,
        "ttl_ms": 5000,
        "sweep_age_ms": 3000
    },

    # Synthetic workload parameters
    "workload": {
        "key_space_size": 5000,
        "num_requests": 50000,
        "seed": 42,
        "zipf_alpha": 1.2,
        "burst_size": 5,
        "burst_freq": 0.2,
        "phase_length": 100,
        "num_phases": 10
    },

    # Benchmark harness
    "benchmark": {
        "tick_ms": 1,  # Simulated time between requests
        "cpu_window_size": 50,  # Log averaged CPU every 50 steps
        "excel_filename": "all_cache_metrics.xlsx",
        "plot_dir": None  # Directory for LFU-TTL plots, None to skip
    }
}
