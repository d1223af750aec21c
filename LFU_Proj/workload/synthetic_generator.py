# Synthetic request streams for exercising the caches
from typing import List, Optional, Tuple
import numpy as np


class WorkloadGenerator:
    def __init__(self, key_space_size: int, num_requests: int, seed: Optional[int] = None):
        if key_space_size <= 0 or num_requests < 0:
            raise ValueError("key_space_size must be positive and num_requests non-negative")
        self.key_space_size = key_space_size
        self.num_requests = num_requests
        self.rng = np.random.default_rng(seed)

    def _to_requests(self, ids) -> List[Tuple[str, str]]:
        return [(f"key_{i}", f"value_{i}") for i in ids]

    def generate_uniform_workload(self) -> List[Tuple[str, str]]:
        """Every key equally likely."""
        ids = self.rng.integers(0, self.key_space_size, size=self.num_requests)
        return self._to_requests(ids)

    def generate_zipf_workload(self, alpha: float = 1.2) -> List[Tuple[str, str]]:
        """Skewed popularity: key rank r is requested with weight 1 / r**alpha."""
        ranks = np.arange(1, self.key_space_size + 1)
        weights = 1.0 / np.power(ranks, alpha)
        weights /= weights.sum()
        ids = self.rng.choice(self.key_space_size, size=self.num_requests, p=weights)
        return self._to_requests(ids)

    def generate_bursty_workload(self, burst_size: int = 5, burst_freq: float = 0.2) -> List[Tuple[str, str]]:
        """Uniform background traffic with runs of repeated requests for one key."""
        if burst_size <= 0:
            raise ValueError("burst_size must be positive")
        ids = []
        while len(ids) < self.num_requests:
            key_id = int(self.rng.integers(0, self.key_space_size))
            if self.rng.random() < burst_freq:
                ids.extend([key_id] * burst_size)
            else:
                ids.append(key_id)
        return self._to_requests(ids[:self.num_requests])

    def generate_phase_workload(self, phase_length: int = 100, num_phases: int = 10) -> List[Tuple[str, str]]:
        """Working set shifts to a fresh slice of the key space every phase."""
        if phase_length <= 0 or num_phases <= 0:
            raise ValueError("phase_length and num_phases must be positive")
        slice_size = max(1, self.key_space_size // num_phases)
        ids = []
        phase = 0
        while len(ids) < self.num_requests:
            start = ((phase % num_phases) * slice_size) % self.key_space_size
            count = min(phase_length, self.num_requests - len(ids))
            ids.extend(self.rng.integers(start, min(start + slice_size, self.key_space_size), size=count))
            phase += 1
        return self._to_requests(ids)
