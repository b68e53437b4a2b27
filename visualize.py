# visualize.py
import os
import numpy as np
import matplotlib.pyplot as plt


def _labels(results):
    return ["s={} E={} b={}".format(r["s"], r["E"], r["b"]) for r in results]


def _ensure_dir(outpath):
    outdir = os.path.dirname(outpath)
    if outdir:
        os.makedirs(outdir, exist_ok=True)


def plot_hit_miss_rate(results, outpath):
    _ensure_dir(outpath)
    labels = _labels(results)
    x = np.arange(len(results))
    hit_rate = np.array([r["hit_rate"] for r in results])
    miss_rate = np.array([r["miss_rate"] for r in results])
    plt.figure(figsize=(max(4, len(results) * 1.2), 4))
    plt.bar(x, hit_rate, label="Hit")
    plt.bar(x, miss_rate, bottom=hit_rate, label="Miss")
    plt.xticks(x, labels, rotation=30, ha="right")
    plt.ylim(0, 1)
    plt.ylabel("Rate")
    plt.title("Cache Hit/Miss Rate by Geometry")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outpath)
    plt.close()


def plot_outcome_counts(results, outpath):
    _ensure_dir(outpath)
    labels = _labels(results)
    x = np.arange(len(results))
    width = 0.27
    plt.figure(figsize=(max(6, len(results) * 1.5), 4))
    plt.bar(x - width, [r["hits"] for r in results], width, label="Hits")
    plt.bar(x, [r["misses"] for r in results], width, label="Misses")
    plt.bar(x + width, [r["evictions"] for r in results], width, label="Evictions")
    plt.xticks(x, labels, rotation=30, ha="right")
    plt.ylabel("Count")
    plt.title("Hits, Misses and Evictions")
    plt.grid(True, axis="y")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outpath)
    plt.close()
