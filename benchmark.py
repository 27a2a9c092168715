#!/usr/bin/env python3
"""
Automated benchmarking script for distributed word counting.
Runs the local cluster with increasing worker counts and collects run metrics.
"""

import argparse
import csv
import json
import logging
import sys
import time
from datetime import datetime
from pathlib import Path

from wcdist.cluster import LOG_FORMAT, run_local
from wcdist.common.errors import WcdistError
from wcdist.coordinator.task_list import load_task_list

# Configuration
RESULTS_DIR = Path("benchmark_results")
DEFAULT_FILELIST = Path("benchmark_inputs") / "filelist.txt"
DEFAULT_WORKER_COUNTS = [0, 1, 2, 4, 8]


def run_benchmark(filelist, num_workers, mode, run_number=1):
    """Run a single benchmark configuration."""
    print(f"\n{'='*70}")
    print(f"Benchmark: {num_workers} workers, {mode} mode (Run {run_number})")
    print(f"{'='*70}")

    task_list = load_task_list(str(filelist))
    input_size = sum(Path(task.path).stat().st_size for task in task_list if Path(task.path).exists())

    start = time.time()
    try:
        result = run_local(task_list, num_workers, mode=mode)
        success = True
    except WcdistError as e:
        print(f"  ❌ Run failed: {e}")
        success = False
    duration = time.time() - start

    record = {
        "benchmark_name": f"workers_{num_workers}",
        "run_number": run_number,
        "timestamp": datetime.now().isoformat(),
        "mode": mode,
        "num_workers": num_workers,
        "processes": num_workers + 1,
        "files": len(task_list),
        "input_size_bytes": input_size,
        "input_size_mb": round(input_size / 1024 / 1024, 2),
        "success": success,
        "total_runtime_seconds": round(duration, 4),
        "throughput_mbps": round((input_size / 1024 / 1024) / duration, 3) if duration > 0 else 0,
    }
    if success:
        metrics = result.metrics
        record.update({
            "unique_words": metrics.unique_words,
            "total_words": metrics.total_words,
            "files_unavailable": metrics.files_unavailable,
            "peak_rss_mb": round(metrics.peak_rss_bytes / 1024 / 1024, 2),
        })
        print(f"  ✓ Completed in {duration:.2f}s ({metrics.total_words} words)")

    return record


def save_results(results, timestamp):
    """Save results to JSON and CSV files."""
    RESULTS_DIR.mkdir(exist_ok=True)

    json_file = RESULTS_DIR / f"benchmark_results_{timestamp}.json"
    with open(json_file, 'w') as f:
        json.dump(results, f, indent=2)
    print(f"\n✓ Results saved to: {json_file}")

    csv_file = RESULTS_DIR / f"benchmark_results_{timestamp}.csv"
    if results:
        fieldnames = list(dict.fromkeys(key for r in results for key in r))
        with open(csv_file, 'w', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            writer.writerows(results)
        print(f"✓ Results saved to: {csv_file}")

    return json_file, csv_file


def print_summary(results):
    """Print a summary table of results."""
    print(f"\n{'='*70}")
    print("BENCHMARK SUMMARY")
    print(f"{'='*70}")
    print(f"{'Benchmark':<20} {'Procs':>6} {'Files':>6} {'Runtime':>10} {'Status':>10}")
    print(f"{'-'*70}")

    for r in results:
        print(f"{r['benchmark_name']:<20} {r['processes']:>6} {r['files']:>6} "
              f"{r['total_runtime_seconds']:>9.2f}s "
              f"{'✓' if r['success'] else '✗':>10}")

    print(f"{'='*70}")

    successful = sum(1 for r in results if r['success'])
    print(f"Total: {len(results)} benchmarks, {successful} successful, "
          f"{len(results) - successful} failed")


def main():
    """Main benchmarking workflow."""
    parser = argparse.ArgumentParser(description="Benchmark local word-count runs")
    parser.add_argument("--filelist", type=Path, default=DEFAULT_FILELIST,
                        help="File list to count (default: %(default)s)")
    parser.add_argument("--workers", type=int, nargs="+", default=DEFAULT_WORKER_COUNTS,
                        help="Worker counts to run (default: %(default)s)")
    parser.add_argument("--runs", type=int, default=1,
                        help="Runs per worker count (default: %(default)s)")
    parser.add_argument("--threads", action="store_true",
                        help="Run workers as threads instead of processes")
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT)

    print("="*70)
    print("Word Count Scalability Benchmark")
    print("="*70)

    if not args.filelist.exists():
        print(f"❌ Missing file list: {args.filelist}")
        print("   Run scripts/generate_benchmark_inputs.py first")
        sys.exit(1)

    mode = 'thread' if args.threads else 'process'
    print(f"\nRunning {len(args.workers)} configurations × {args.runs} runs")

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    all_results = []
    for num_workers in args.workers:
        for run in range(1, args.runs + 1):
            all_results.append(run_benchmark(args.filelist, num_workers, mode, run_number=run))

    json_file, _ = save_results(all_results, timestamp)
    print_summary(all_results)

    print(f"\n{'='*70}")
    print("Next steps:")
    print(f"  Generate plots: python plot_results.py {json_file}")
    print(f"{'='*70}")


if __name__ == "__main__":
    main()
