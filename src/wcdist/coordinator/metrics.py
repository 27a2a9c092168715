"""
Performance metrics collection for word-count runs.
"""

import time
import json
from dataclasses import dataclass, asdict, field
from typing import Dict

import psutil


@dataclass
class RunMetrics:
    """Metrics for a single run."""

    processes: int
    files: int
    start_time: float
    end_time: float = 0.0
    unique_words: int = 0
    total_words: int = 0
    files_unavailable: int = 0
    peak_rss_bytes: int = 0
    tasks_per_worker: Dict[str, int] = field(default_factory=dict)

    @property
    def workers(self) -> int:
        return self.processes - 1

    @property
    def total_time_seconds(self) -> float:
        """Total run time in seconds."""
        return self.end_time - self.start_time

    def to_dict(self) -> dict:
        """Convert metrics to dictionary."""
        data = asdict(self)
        data['total_time_seconds'] = self.total_time_seconds
        return data

    def save_to_file(self, filepath: str):
        """Save metrics to JSON file."""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    def format_summary(self) -> str:
        """Human-readable scalability summary."""
        lines = [
            "SCALABILITY RESULTS",
            f"Processes used: {self.processes}",
            f"Files processed: {self.files}",
            f"Unique words: {self.unique_words}",
            f"Total words: {self.total_words}",
            f"Total execution time: {self.total_time_seconds:.4f} seconds",
        ]
        if self.files_unavailable:
            lines.append(f"Files unavailable: {self.files_unavailable}")
        return '\n'.join(lines)


class MetricsCollector:
    """Collects metrics across the phases of one run."""

    def __init__(self, processes: int, files: int):
        self.process = psutil.Process()
        self.metrics = RunMetrics(processes=processes, files=files, start_time=time.time())
        self._sample_memory()

    def _sample_memory(self):
        rss = self.process.memory_info().rss
        self.metrics.peak_rss_bytes = max(self.metrics.peak_rss_bytes, rss)

    def finish(self, histogram, tasks_per_worker=None, files_unavailable: int = 0) -> RunMetrics:
        """Record the end of the run and the shape of its result."""
        self._sample_memory()
        self.metrics.end_time = time.time()
        self.metrics.unique_words = len(histogram)
        self.metrics.total_words = histogram.total()
        self.metrics.files_unavailable = files_unavailable
        if tasks_per_worker:
            self.metrics.tasks_per_worker = {str(w): n for w, n in tasks_per_worker.items()}
        return self.metrics
