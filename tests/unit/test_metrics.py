"""
Unit tests for run metrics
"""

import json
import os
from collections import Counter

from wcdist.common.histogram import Histogram
from wcdist.coordinator.metrics import MetricsCollector, RunMetrics


class TestRunMetrics:

    def test_derived_values(self):
        metrics = RunMetrics(processes=3, files=10, start_time=100.0, end_time=102.5)
        assert metrics.workers == 2
        assert metrics.total_time_seconds == 2.5

    def test_summary(self):
        metrics = RunMetrics(processes=3, files=10, start_time=0.0, end_time=1.0,
                             unique_words=7, total_words=20)
        summary = metrics.format_summary()

        assert summary.startswith('SCALABILITY RESULTS')
        assert 'Processes used: 3' in summary
        assert 'Files processed: 10' in summary
        assert 'Total execution time: 1.0000 seconds' in summary
        assert 'unavailable' not in summary

    def test_summary_reports_unavailable_files(self):
        metrics = RunMetrics(processes=1, files=2, start_time=0.0, end_time=1.0, files_unavailable=1)
        assert 'Files unavailable: 1' in metrics.format_summary()

    def test_save_to_file(self, temp_dir):
        metrics = RunMetrics(processes=2, files=1, start_time=0.0, end_time=3.0)
        path = os.path.join(temp_dir, 'metrics.json')
        metrics.save_to_file(path)

        with open(path) as f:
            data = json.load(f)
        assert data['processes'] == 2
        assert data['total_time_seconds'] == 3.0


class TestMetricsCollector:

    def test_finish_records_histogram_shape(self):
        collector = MetricsCollector(processes=3, files=2)
        histogram = Histogram([('fox', 2), ('dog', 1)])

        metrics = collector.finish(histogram, tasks_per_worker=Counter({1: 2, 2: 0}), files_unavailable=1)

        assert metrics.unique_words == 2
        assert metrics.total_words == 3
        assert metrics.files_unavailable == 1
        assert metrics.tasks_per_worker == {'1': 2, '2': 0}
        assert metrics.end_time >= metrics.start_time
        assert metrics.peak_rss_bytes > 0
