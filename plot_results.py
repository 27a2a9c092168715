#!/usr/bin/env python3
"""
Generate plots from benchmark results.
"""

import json
import sys
from pathlib import Path
import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt
import numpy as np
from collections import defaultdict

# Configuration
PLOTS_DIR = Path("benchmark_results/plots")


def load_results(json_file):
    """Load benchmark results from JSON file."""
    with open(json_file, 'r') as f:
        return json.load(f)


def aggregate_runs(results):
    """
    Aggregate multiple runs of the same worker count.
    Returns dict: processes -> {avg_runtime, std_runtime, ...}
    """
    by_processes = defaultdict(list)

    for r in results:
        if r['success']:  # Only include successful runs
            by_processes[r['processes']].append(r)

    aggregated = {}
    for processes, runs in by_processes.items():
        runtimes = [r['total_runtime_seconds'] for r in runs]
        throughputs = [r['throughput_mbps'] for r in runs]
        first = runs[0]

        aggregated[processes] = {
            'processes': processes,
            'num_workers': first['num_workers'],
            'mode': first['mode'],
            'files': first['files'],
            'input_size_mb': first['input_size_mb'],
            'avg_runtime': np.mean(runtimes),
            'std_runtime': np.std(runtimes),
            'min_runtime': np.min(runtimes),
            'max_runtime': np.max(runtimes),
            'avg_throughput': np.mean(throughputs),
            'num_runs': len(runs)
        }

    return aggregated


def plot_runtime(aggregated, output_file):
    """Plot runtime vs number of processes."""
    if not aggregated:
        print("⚠️  No successful runs to plot")
        return

    data = sorted((v['processes'], v['avg_runtime'], v['std_runtime']) for v in aggregated.values())
    processes, runtimes, stds = zip(*data)

    plt.figure(figsize=(10, 6))
    plt.errorbar(processes, runtimes, yerr=stds, marker='o', capsize=5,
                 linewidth=2, markersize=8)
    plt.xlabel('Processes (coordinator + workers)', fontsize=12)
    plt.ylabel('Runtime (seconds)', fontsize=12)
    plt.title('Word Count Runtime vs Process Count', fontsize=14, fontweight='bold')
    plt.xticks(processes)
    plt.grid(True, alpha=0.3)
    plt.tight_layout()
    plt.savefig(output_file, dpi=300, bbox_inches='tight')
    print(f"✓ Saved: {output_file}")
    plt.close()


def plot_speedup(aggregated, output_file):
    """Plot speedup relative to the single-process run."""
    if len(aggregated) < 2:
        print("⚠️  Insufficient data for speedup plot")
        return

    data = sorted((v['processes'], v['avg_runtime']) for v in aggregated.values())
    processes, runtimes = zip(*data)

    baseline = runtimes[0]
    speedups = [baseline / rt for rt in runtimes]
    # Workers do the counting, so ideal speedup tracks the worker count
    ideal_speedup = [max(1, p - 1) for p in processes]

    plt.figure(figsize=(10, 6))
    plt.plot(processes, speedups, marker='o', linewidth=2, markersize=8,
             label='Actual Speedup', color='blue')
    plt.plot(processes, ideal_speedup, linestyle='--', linewidth=2,
             label='Ideal (Linear) Speedup', color='gray', alpha=0.7)
    plt.xlabel('Processes (coordinator + workers)', fontsize=12)
    plt.ylabel('Speedup', fontsize=12)
    plt.title('Word Count Speedup vs Ideal Linear Speedup',
              fontsize=14, fontweight='bold')
    plt.xticks(processes)
    plt.legend(fontsize=11)
    plt.grid(True, alpha=0.3)
    plt.tight_layout()
    plt.savefig(output_file, dpi=300, bbox_inches='tight')
    print(f"✓ Saved: {output_file}")
    plt.close()


def generate_summary_table(aggregated, output_file):
    """Generate a markdown table summarizing all results."""
    lines = [
        "# Benchmark Results Summary\n",
        "| Processes | Workers | Files | Input (MB) | Avg Runtime (s) | Std Dev | Throughput (MB/s) |",
        "|-----------|---------|-------|------------|-----------------|---------|-------------------|"
    ]

    for processes in sorted(aggregated):
        v = aggregated[processes]
        lines.append(
            f"| {processes:>9} | {v['num_workers']:>7} | {v['files']:>5} | "
            f"{v['input_size_mb']:>10.2f} | {v['avg_runtime']:>15.3f} | "
            f"{v['std_runtime']:>7.3f} | {v['avg_throughput']:>17.3f} |"
        )

    with open(output_file, 'w') as f:
        f.write('\n'.join(lines))

    print(f"✓ Saved: {output_file}")


def main():
    """Generate all plots from benchmark results."""
    if len(sys.argv) < 2:
        print("Usage: python plot_results.py <results.json>")
        print("\nExample:")
        print("  python plot_results.py benchmark_results/benchmark_results_20250113_120000.json")
        sys.exit(1)

    json_file = sys.argv[1]

    if not Path(json_file).exists():
        print(f"❌ File not found: {json_file}")
        sys.exit(1)

    print(f"Loading results from: {json_file}")
    results = load_results(json_file)
    print(f"✓ Loaded {len(results)} benchmark results")

    aggregated = aggregate_runs(results)
    print(f"✓ Aggregated into {len(aggregated)} process counts")

    PLOTS_DIR.mkdir(parents=True, exist_ok=True)

    print("\nGenerating plots...")
    plot_runtime(aggregated, PLOTS_DIR / "1_runtime_scaling.png")
    plot_speedup(aggregated, PLOTS_DIR / "2_speedup_analysis.png")
    generate_summary_table(aggregated, PLOTS_DIR / "results_table.md")

    print(f"\n{'='*70}")
    print(f"All plots saved to: {PLOTS_DIR}/")
    print(f"{'='*70}")


if __name__ == "__main__":
    main()
