"""
Local cluster: runs the coordinator in this process and the workers as
threads or child processes, connected by per-participant inbox queues.
"""

import sys
import queue
import logging
import threading
import multiprocessing
from dataclasses import dataclass, field
from typing import Dict, List

from wcdist.common.errors import WcdistError
from wcdist.common.histogram import Histogram
from wcdist.common.tokenizer import DEFAULT_CHUNK_SIZE
from wcdist.common.transport import QueueTransport
from wcdist.coordinator.metrics import MetricsCollector, RunMetrics
from wcdist.coordinator.server import Coordinator
from wcdist.coordinator.task_list import TaskList
from wcdist.worker.server import WorkerReport, run_worker

logger = logging.getLogger(__name__)

COORDINATOR_ADDRESS = 0
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


@dataclass
class RunResult:
    """Outcome of a complete run."""
    histogram: Histogram
    metrics: RunMetrics
    worker_reports: List[WorkerReport] = field(default_factory=list)


def run_local(task_list: TaskList, num_workers: int, mode: str = 'process',
              chunk_size: int = DEFAULT_CHUNK_SIZE) -> RunResult:
    """
    Count the files of task_list with num_workers local workers.

    Args:
        task_list: Files to count
        num_workers: Number of workers; 0 counts everything in this process
        mode: 'process' for child processes, 'thread' for threads
        chunk_size: Read size used by the tokenizer

    Returns:
        RunResult with the global histogram and run metrics
    """
    if num_workers < 0:
        raise ValueError(f"num_workers must be >= 0, got {num_workers}")
    if mode not in ('process', 'thread'):
        raise ValueError(f"Unknown mode {mode!r}")

    collector = MetricsCollector(processes=num_workers + 1, files=len(task_list))

    if num_workers == 0:
        coordinator = Coordinator(None, [], task_list, chunk_size)
        histogram = coordinator.run()
        metrics = collector.finish(histogram, files_unavailable=len(coordinator.unavailable))
        return RunResult(histogram=histogram, metrics=metrics)

    if mode == 'thread':
        coordinator, reports = _run_threads(task_list, num_workers, chunk_size)
    else:
        coordinator, reports = _run_processes(task_list, num_workers, chunk_size)

    histogram = coordinator.global_histogram
    metrics = collector.finish(
        histogram,
        tasks_per_worker=coordinator.tasks_per_worker,
        files_unavailable=sum(r.files_unavailable for r in reports),
    )
    return RunResult(histogram=histogram, metrics=metrics, worker_reports=reports)


def _run_threads(task_list, num_workers, chunk_size):
    addresses = list(range(num_workers + 1))
    inboxes = {address: queue.Queue() for address in addresses}
    workers = addresses[1:]
    reports: Dict[int, WorkerReport] = {}

    def serve(address):
        try:
            reports[address] = run_worker(QueueTransport(address, inboxes), COORDINATOR_ADDRESS, chunk_size)
        except WcdistError as e:
            logger.error(f"Worker {address} failed: {e}")

    threads = [
        threading.Thread(target=serve, args=(address,), name=f"worker-{address}", daemon=True)
        for address in workers
    ]
    for thread in threads:
        thread.start()

    coordinator = Coordinator(QueueTransport(COORDINATOR_ADDRESS, inboxes), workers, task_list, chunk_size)
    coordinator.run()

    for thread in threads:
        thread.join()
    return coordinator, [reports[address] for address in workers]


def _worker_process(address, inboxes, chunk_size, results, log_level):
    logging.basicConfig(level=log_level, format=LOG_FORMAT)
    try:
        report = run_worker(QueueTransport(address, inboxes), COORDINATOR_ADDRESS, chunk_size)
    except WcdistError as e:
        logger.error(f"Worker {address} failed: {e}")
        sys.exit(1)
    results.put(report)


def _run_processes(task_list, num_workers, chunk_size):
    ctx = multiprocessing.get_context()
    addresses = list(range(num_workers + 1))
    inboxes = {address: ctx.Queue() for address in addresses}
    results = ctx.Queue()
    workers = addresses[1:]
    log_level = logging.getLogger().getEffectiveLevel()

    processes = [
        ctx.Process(
            target=_worker_process,
            args=(address, inboxes, chunk_size, results, log_level),
            name=f"wcdist-worker-{address}",
        )
        for address in workers
    ]
    for process in processes:
        process.start()

    try:
        coordinator = Coordinator(QueueTransport(COORDINATOR_ADDRESS, inboxes), workers, task_list, chunk_size)
        coordinator.run()
        # Drain results before joining so no child blocks on a full pipe
        reports = [results.get() for _ in processes]
    except BaseException:
        for process in processes:
            if process.is_alive():
                process.terminate()
        raise

    for process in processes:
        process.join()
    reports.sort(key=lambda report: report.address)
    return coordinator, reports
