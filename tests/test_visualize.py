import matplotlib

matplotlib.use("Agg")

from visualize import plot_hit_miss_rate, plot_outcome_counts

RESULTS = [
    {"s": 4, "E": 1, "b": 4, "hits": 4, "misses": 5, "evictions": 3, "hit_rate": 4 / 9, "miss_rate": 5 / 9},
    {"s": 1, "E": 1, "b": 1, "hits": 2, "misses": 7, "evictions": 5, "hit_rate": 2 / 9, "miss_rate": 7 / 9},
]


def test_plots_written(tmp_path):
    hitmiss = tmp_path / "plots" / "hit_miss_rate.png"
    counts = tmp_path / "plots" / "outcome_counts.png"
    plot_hit_miss_rate(RESULTS, str(hitmiss))
    plot_outcome_counts(RESULTS, str(counts))
    assert hitmiss.stat().st_size > 0
    assert counts.stat().st_size > 0


def test_plot_in_current_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    plot_hit_miss_rate(RESULTS[:1], "rate.png")
    assert (tmp_path / "rate.png").exists()
