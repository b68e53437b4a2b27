# main.py
import argparse
import json
import logging
import sys
from cache import Geometry, GeometryError, LRUCache
from tracefile import read_trace, format_record

USAGE_EXAMPLES = """Examples:
  linux>  csim -s 4 -E 1 -b 4 -t traces/yi.trace
  linux>  csim -v -s 8 -E 2 -b 4 -t traces/yi.trace
  linux>  csim --sweep config.json
"""


def build_parser():
    ap = argparse.ArgumentParser(
        prog="csim",
        description="Set-associative LRU cache simulator",
        epilog=USAGE_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    ap.add_argument("-v", dest="verbose", action="store_true", help="Optional verbose flag.")
    ap.add_argument("-s", dest="s", type=int, default=None, help="Number of set index bits.")
    ap.add_argument("-E", dest="E", type=int, default=None, help="Number of lines per set.")
    ap.add_argument("-b", dest="b", type=int, default=None, help="Number of block offset bits.")
    ap.add_argument("-t", dest="trace", default=None, help="Trace file.")
    ap.add_argument("--results", default=None, help="Also write '<hits> <misses> <evictions>' to this file")
    ap.add_argument("--sweep", metavar="CONFIG", default=None, help="Run the geometry sweep described by a JSON config")
    ap.add_argument("--debug", "-D", dest="debug", action="store_true", help="output debug messages")
    return ap


def load_config(path="config.json"):
    with open(path, "r") as f:
        return json.load(f)


def print_summary(hits, misses, evictions, results_path=None):
    print("hits:{} misses:{} evictions:{}".format(hits, misses, evictions))
    if results_path:
        with open(results_path, "w") as f:
            f.write("{} {} {}\n".format(hits, misses, evictions))


def simulate(geometry, trace_path, verbose=False):
    cache = LRUCache(geometry)
    for record, outcomes in cache.replay(read_trace(trace_path)):
        if verbose:
            print("{} {}".format(format_record(record), " ".join(outcomes)))
    return cache


def run_sweep(config_path):
    from benchmark import SweepRunner, rates
    from visualize import plot_hit_miss_rate, plot_outcome_counts

    cfg = load_config(config_path)
    runner = SweepRunner(cfg)
    results = runner.run()
    for r in results:
        print("s={s} E={E} b={b} hits:{hits} misses:{misses} evictions:{evictions} hit_rate={hit_rate:.4f}".format(**r))
    hit_rate, _ = rates(results)
    if len(hit_rate):
        best = results[int(hit_rate.argmax())]
        print("Best geometry: s={s} E={E} b={b}".format(**best))
    out_cfg = cfg.get("output", {})
    print("Results saved to:", runner.save_results(results, out_cfg))
    if results and out_cfg.get("plots", True):
        plot_hit_miss_rate(results, out_cfg.get("hitmiss_plot", "results/hit_miss_rate.png"))
        plot_outcome_counts(results, out_cfg.get("counts_plot", "results/outcome_counts.png"))
        print("Plots saved in", out_cfg.get("results_dir", "results"))
    return results


def main(argv=None):
    ap = build_parser()
    args = ap.parse_args(argv)
    logging.basicConfig(
        format="%(message)s",
        level=(logging.DEBUG if args.debug else logging.WARNING),
    )
    logging.debug("args : {}".format(args))

    if args.sweep:
        try:
            run_sweep(args.sweep)
        except (OSError, ValueError, KeyError) as e:
            print("csim: sweep failed: {}".format(e), file=sys.stderr)
            return 1
        return 0

    if None in (args.s, args.E, args.b, args.trace):
        print("Missing required command line argument")
        ap.print_help()
        return 1

    try:
        geometry = Geometry(args.s, args.E, args.b)
    except GeometryError as e:
        print("csim: invalid geometry: {}".format(e), file=sys.stderr)
        return 1

    try:
        cache = simulate(geometry, args.trace, verbose=args.verbose)
    except OSError as e:
        print("csim: cannot read trace: {}".format(e), file=sys.stderr)
        return 1
    except MemoryError:
        print("csim: cache too large to simulate: {} sets of {} lines".format(
            geometry.num_sets, geometry.E), file=sys.stderr)
        return 1
    logging.debug("stats : {}".format(cache.stats()))
    print_summary(cache.hits, cache.misses, cache.evictions, args.results)
    return 0


if __name__ == "__main__":
    sys.exit(main())
