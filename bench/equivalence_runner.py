"""
Equivalence runner CLI: random stimulus through every FIFO variant.

Checks, for each variant:
  - data order: every accepted write is delivered exactly once, in order;
  - for the base controller (standard and show-ahead), the per-cycle level,
    flags and q against the software reference model.

Usage:
  python -m bench.equivalence_runner --capacity 8 --cycles 2000
  python -m bench.equivalence_runner --capacity 5 --seeds 10 --json
"""

import argparse
import json
import os
import random
import time

from .fifo_model import FIFOModel
from .hw_fifo_sim import HWFIFOSimulator

from hwfifo.top import FIFO_VARIANTS, build_fifo

RESULTS_DIR = os.path.join(os.path.dirname(__file__), "results")

SHOW_AHEAD_VARIANTS = {"show-ahead", "show-ahead-from-classic", "show-ahead-extra-reg"}
MODELLED_VARIANTS = {"standard", "show-ahead"}

WIDTH = 16


def random_stimulus(rng, cycles, *, wr_prob=0.5, rd_prob=0.5, drain=0):
    """Random (wr, d, rd) cycles; write data is a running counter."""
    stimulus = []
    count = 0
    for _ in range(cycles):
        wr = int(rng.random() < wr_prob)
        rd = int(rng.random() < rd_prob)
        stimulus.append((wr, count % (1 << WIDTH), rd))
        count += wr
    # Drain with reads only so every accepted entry comes out
    stimulus.extend((0, 0, 1) for _ in range(drain))
    return stimulus


def compare_traces(hw_trace, model_trace):
    """Return a list of mismatch strings between hardware and model traces."""
    errors = []
    for cycle, (hw, model) in enumerate(zip(hw_trace, model_trace)):
        for name in ("used", "empty", "full", "nearly_empty", "nearly_full"):
            got, expected = getattr(hw, name), getattr(model, name)
            if got != expected:
                errors.append(f"cycle {cycle}: {name} expected {expected}, got {got}")
        if model.q is not None and hw.q != model.q:
            errors.append(f"cycle {cycle}: q expected {model.q}, got {hw.q}")
    return errors


def run_variant(variant, stimulus, capacity):
    """Run one variant. Returns result dict."""
    fifo = build_fifo(variant, width=WIDTH, capacity=capacity, clear=True)
    show_ahead = variant in SHOW_AHEAD_VARIANTS

    t0 = time.perf_counter()
    sim = HWFIFOSimulator(fifo, show_ahead=show_ahead)
    result = sim.run(stimulus)
    elapsed = time.perf_counter() - t0

    errors = []
    if result.consumed != result.written:
        errors.append(
            f"data order: wrote {len(result.written)} entries, "
            f"read {len(result.consumed)}; first difference at index "
            f"{_first_difference(result.written, result.consumed)}")

    if variant in MODELLED_VARIANTS:
        model = FIFOModel(capacity, show_ahead=show_ahead)
        errors.extend(compare_traces(result.trace, model.run(stimulus)))

    return {
        "variant": variant,
        "cycles": result.cycles,
        "written": len(result.written),
        "consumed": len(result.consumed),
        "max_used": max(s.used for s in result.trace),
        "sim_time_s": round(elapsed, 3),
        "passed": not errors,
        "errors": errors[:10],
    }


def _first_difference(a, b):
    for i, (x, y) in enumerate(zip(a, b)):
        if x != y:
            return i
    return min(len(a), len(b))


def print_summary_table(results):
    """Print a summary table to stdout."""
    print()
    print(f"{'Variant':<26} {'Seed':>5} {'Cycles':>7} {'Wr':>6} {'Rd':>6} "
          f"{'MaxUsed':>8} {'Result':>7}")
    print("-" * 70)
    for r in results:
        print(f"{r['variant']:<26} {r['seed']:>5} {r['cycles']:>7} "
              f"{r['written']:>6} {r['consumed']:>6} {r['max_used']:>8} "
              f"{'PASS' if r['passed'] else 'FAIL':>7}")
        for e in r["errors"]:
            print(f"    {e}")
    print()


def main():
    parser = argparse.ArgumentParser(
        description="Check every FIFO variant against the reference model")
    parser.add_argument("--capacity", type=int, default=8)
    parser.add_argument("--cycles", type=int, default=1000)
    parser.add_argument("--seeds", type=int, default=1,
                        help="Number of random seeds to run")
    parser.add_argument("--wr-prob", type=float, default=0.5)
    parser.add_argument("--rd-prob", type=float, default=0.5)
    parser.add_argument("--variant", choices=list(FIFO_VARIANTS), default=None,
                        help="Run a single variant (default all)")
    parser.add_argument("--json", action="store_true",
                        help="Write results to bench/results/")
    args = parser.parse_args()

    variants = [args.variant] if args.variant else list(FIFO_VARIANTS)
    drain = 2 * (args.capacity + 4)

    results = []
    for seed in range(args.seeds):
        rng = random.Random(seed)
        stimulus = random_stimulus(rng, args.cycles, wr_prob=args.wr_prob,
                                   rd_prob=args.rd_prob, drain=drain)
        for variant in variants:
            print(f"  Running {variant} (seed {seed}) ...")
            r = run_variant(variant, stimulus, args.capacity)
            r["seed"] = seed
            results.append(r)

    print_summary_table(results)

    if args.json:
        os.makedirs(RESULTS_DIR, exist_ok=True)
        path = os.path.join(RESULTS_DIR, f"equivalence_c{args.capacity}.json")
        with open(path, "w") as f:
            json.dump(results, f, indent=2)
        print(f"Results written to {path}")

    failed = sum(1 for r in results if not r["passed"])
    print(f"{len(results) - failed}/{len(results)} runs passed.")


if __name__ == "__main__":
    main()
