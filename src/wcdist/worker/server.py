"""
Worker loop.

A worker waits for instructions from the coordinator. Each TASK names a file
to count into the local histogram and is acknowledged with READY. TERMINATE
makes the worker send its whole histogram once (entry count, then each word
followed by its frequency) and stop.
"""

import logging
from dataclasses import dataclass
from typing import Hashable, Optional

from wcdist.common.errors import ProtocolViolation, ResourceExhaustion
from wcdist.common.histogram import Histogram
from wcdist.common.protocol import Tag, expect
from wcdist.common.transport import Transport
from wcdist.worker.task_executor import TaskExecutor

logger = logging.getLogger(__name__)


@dataclass
class WorkerReport:
    """What one worker did during a run."""
    address: Hashable
    tasks_completed: int = 0
    files_unavailable: int = 0
    unique_words_sent: int = 0
    words_sent: int = 0


class Worker:
    """Executes tasks for one coordinator and returns one histogram at shutdown."""

    def __init__(self, transport: Transport, coordinator: Optional[Hashable] = None,
                 executor: Optional[TaskExecutor] = None):
        """
        Args:
            transport: Messaging endpoint of this worker
            coordinator: Coordinator address; None binds to whoever sends
                the first message
            executor: Task executor holding the local histogram
        """
        self.transport = transport
        self.coordinator = coordinator
        self.executor = executor or TaskExecutor()
        self.report = WorkerReport(address=transport.address)

    def run(self) -> WorkerReport:
        """
        Serve the coordinator until terminated.

        Fatal errors abort the whole run before being re-raised.

        Raises:
            ProtocolViolation: If the coordinator sends an unexpected message
            ResourceExhaustion: If the worker runs out of memory
            RunAborted: If the coordinator aborted the run
        """
        logger.info(f"Worker {self.transport.address!r} serving coordinator {self.coordinator!r}")
        try:
            self._serve()
        except MemoryError as e:
            logger.critical(f"Worker {self.transport.address!r} out of memory, aborting run")
            self._abort()
            raise ResourceExhaustion(f"Worker {self.transport.address!r} out of memory") from e
        except ProtocolViolation as e:
            logger.error(f"Worker {self.transport.address!r}: {e}")
            self._abort()
            raise
        return self.report

    def _serve(self):
        while True:
            message = self.transport.recv(source=self.coordinator)
            if self.coordinator is None:
                self.coordinator = message.source
                logger.info(f"Worker {self.transport.address!r} bound to coordinator {self.coordinator!r}")

            if message.tag == Tag.TASK:
                path = expect(message, Tag.TASK, str)
                logger.debug(f"Worker {self.transport.address!r} assigned {path}")
                self._run_task(path)
                self.transport.send(self.coordinator, Tag.READY)

            elif message.tag == Tag.TERMINATE:
                self._send_histogram()
                logger.info(
                    f"Worker {self.transport.address!r} done: {self.report.tasks_completed} tasks, "
                    f"{self.report.unique_words_sent} unique words sent, "
                    f"rss {self.executor.get_memory_usage() / 1024 / 1024:.1f} MB"
                )
                return

            else:
                raise ProtocolViolation(
                    f"Worker expected TASK or TERMINATE, got {message.tag.name}",
                    source=message.source, tag=message.tag
                )

    def _abort(self):
        self.transport.abort([self.coordinator] if self.coordinator is not None else [])

    def _run_task(self, path: str):
        before = len(self.executor.unavailable)
        self.executor.execute(path)
        self.report.tasks_completed += 1
        self.report.files_unavailable += len(self.executor.unavailable) - before

    def _send_histogram(self) -> Histogram:
        # The local histogram leaves the worker here and is not kept
        histogram = self.executor.take_histogram()
        self.transport.send(self.coordinator, Tag.HIST_COUNT, len(histogram))
        for word, frequency in histogram.items():
            self.transport.send(self.coordinator, Tag.HIST_WORD, word)
            self.transport.send(self.coordinator, Tag.HIST_FREQ, frequency)

        self.report.unique_words_sent = len(histogram)
        self.report.words_sent = histogram.total()
        return histogram


def run_worker(transport: Transport, coordinator: Optional[Hashable] = None,
               chunk_size: Optional[int] = None) -> WorkerReport:
    """Build a worker around transport and run it to completion."""
    executor = TaskExecutor(chunk_size) if chunk_size else TaskExecutor()
    return Worker(transport, coordinator, executor).run()
