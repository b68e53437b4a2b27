# benchmark.py
import os
import json
import time
import logging
import threading
import numpy as np
from cache import Geometry, LRUCache
from tracefile import TraceRecord, read_trace


class SweepRunner:
    """
    Replays one trace against every geometry in the config and collects
    hit/miss/eviction counts for each.
    """

    def __init__(self, cfg):
        self.cfg = cfg
        trace_cfg = cfg.get("trace", {})
        self.rng = np.random.default_rng(trace_cfg.get("random_seed", None))
        # all geometries are validated before any simulation runs
        self.geometries = [
            Geometry(g["s"], g["E"], g["b"]) for g in cfg.get("geometries", [])
        ]
        self.trace_file = trace_cfg.get("file")
        self.num_accesses = trace_cfg.get("num_accesses", 10000)
        self.address_space = trace_cfg.get("address_space", 1 << 16)
        self.stride = trace_cfg.get("stride", 4)
        self.access_pattern = trace_cfg.get("pattern", "mixed")
        self.store_ratio = trace_cfg.get("store_ratio", 0.2)
        self.modify_ratio = trace_cfg.get("modify_ratio", 0.1)
        self.access_size = trace_cfg.get("access_size", 4)
        self.num_threads = max(1, cfg.get("num_threads", 4))
        self.results_lock = threading.Lock()
        self.results = {}

    def _generate_addresses(self):
        n = self.num_accesses
        if self.address_space < 1:
            raise ValueError("address_space must be >= 1, got {}".format(self.address_space))
        if self.access_pattern == "sequential":
            return (np.arange(n, dtype=np.uint64) * np.uint64(self.stride)) % np.uint64(self.address_space)
        elif self.access_pattern == "random":
            return self.rng.integers(0, self.address_space, size=n, dtype=np.uint64)
        elif self.access_pattern == "mixed":
            # mostly sequential with some random
            seq = (np.arange(n, dtype=np.uint64) * np.uint64(self.stride)) % np.uint64(self.address_space)
            rnd = self.rng.integers(0, self.address_space, size=n, dtype=np.uint64)
            return np.where(self.rng.random(n) < 0.8, seq, rnd)
        raise ValueError("unknown access pattern {!r}".format(self.access_pattern))

    def generate_trace(self):
        addresses = self._generate_addresses()
        draws = self.rng.random(len(addresses))
        kinds = np.where(
            draws < self.modify_ratio,
            "M",
            np.where(draws < self.modify_ratio + self.store_ratio, "S", "L"),
        )
        return [
            TraceRecord(str(k), int(a), self.access_size) for k, a in zip(kinds, addresses)
        ]

    def load_trace(self):
        if self.trace_file:
            logging.debug("loading trace from {}".format(self.trace_file))
            return list(read_trace(self.trace_file))
        logging.debug(
            "generating {} {} accesses over {} bytes".format(
                self.num_accesses, self.access_pattern, self.address_space
            )
        )
        return self.generate_trace()

    def _worker(self, jobs, trace):
        local_results = {}
        for pos, geometry in jobs:
            cache = LRUCache(geometry)
            cache.run(trace)
            local_results[pos] = summarize(cache)

        with self.results_lock:
            self.results.update(local_results)

    def run(self, trace=None):
        if trace is None:
            trace = self.load_trace()
        jobs = list(enumerate(self.geometries))
        self.results = {}
        threads = []
        start = time.time()
        for i in range(min(self.num_threads, len(jobs))):
            t = threading.Thread(target=self._worker, args=(jobs[i::self.num_threads], trace))
            t.start()
            threads.append(t)
        for t in threads:
            t.join()
        end = time.time()
        logging.debug("swept {} geometries in {:.3f}s".format(len(jobs), end - start))
        return [self.results[pos] for pos, _ in jobs]

    def save_results(self, results, out_cfg):
        results_dir = out_cfg.get("results_dir", "results")
        os.makedirs(results_dir, exist_ok=True)
        path = os.path.join(results_dir, out_cfg.get("results_file", "results.json"))
        with open(path, "w") as f:
            json.dump(results, f, indent=2)
        return path


def summarize(cache):
    summary = cache.stats()
    accesses = summary["accesses"]
    summary["hit_rate"] = (summary["hits"] / accesses) if accesses else 0.0
    summary["miss_rate"] = (summary["misses"] / accesses) if accesses else 0.0
    return summary


def rates(results):
    """Hit and miss rates of a sweep as numpy arrays, in result order."""
    hit_rate = np.array([r["hit_rate"] for r in results], dtype=float)
    miss_rate = np.array([r["miss_rate"] for r in results], dtype=float)
    return hit_rate, miss_rate
