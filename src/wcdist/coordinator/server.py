"""
Coordinator: dispatches file tasks to workers and merges their histograms.

With no workers the coordinator counts every file itself. Otherwise each
worker is primed with one message, then served reactively: whichever worker
reports READY first gets the next task, or, once the task list is exhausted,
TERMINATE followed immediately by a blocking drain of its histogram.
"""

import logging
from collections import Counter
from enum import Enum
from typing import Dict, Hashable, List, Optional, Sequence

from wcdist.common.errors import ConfigurationError, ProtocolViolation, ResourceExhaustion, RunAborted
from wcdist.common.histogram import Histogram, merge
from wcdist.common.protocol import ANY_SOURCE, ANY_TAG, Message, Tag, expect
from wcdist.common.tokenizer import DEFAULT_CHUNK_SIZE, FileUnavailable, count_words_in_file
from wcdist.common.transport import Transport
from wcdist.coordinator.task_list import TaskList

logger = logging.getLogger(__name__)


class WorkerState(Enum):
    """Where a worker is in its lifecycle, as seen by the coordinator."""
    IDLE = "idle"
    ASSIGNED = "assigned"
    TERMINATING = "terminating"
    COLLECTED = "collected"


# Allowed lifecycle moves; anything else is a protocol error
TRANSITIONS = {
    WorkerState.IDLE: {WorkerState.ASSIGNED, WorkerState.TERMINATING},
    WorkerState.ASSIGNED: {WorkerState.IDLE},
    WorkerState.TERMINATING: {WorkerState.COLLECTED},
    WorkerState.COLLECTED: set(),
}


class Coordinator:
    """Owns the task list and the global histogram for one run."""

    def __init__(self, transport: Optional[Transport], workers: Sequence[Hashable],
                 task_list: TaskList, chunk_size: int = DEFAULT_CHUNK_SIZE):
        """
        Args:
            transport: Messaging endpoint; may be None when there are no workers
            workers: Addresses of every worker taking part in the run
            task_list: Files to count
            chunk_size: Read size used when counting files directly
        """
        if len(set(workers)) != len(workers):
            raise ConfigurationError(f"Worker addresses must be unique, got {list(workers)}")
        if workers and transport is None:
            raise ConfigurationError("A transport is required when workers are present")

        self.transport = transport
        self.workers: List[Hashable] = list(workers)
        self.task_list = task_list
        self.chunk_size = chunk_size

        self.global_histogram = Histogram()
        self.states: Dict[Hashable, WorkerState] = {w: WorkerState.IDLE for w in self.workers}
        self.tasks_per_worker: Counter = Counter()
        self.unavailable: List[FileUnavailable] = []

    def run(self) -> Histogram:
        """
        Count every file in the task list and return the global histogram.

        Raises:
            ProtocolViolation: If a worker breaks the protocol
            ResourceExhaustion: If memory runs out here or on a worker
            RunAborted: If a worker aborted the run; live workers are told too
        """
        try:
            if not self.workers:
                self._run_single_process()
            else:
                self._run_distributed()
        except MemoryError as e:
            logger.critical("Coordinator out of memory, aborting run")
            self._abort()
            raise ResourceExhaustion("Coordinator out of memory") from e
        except ProtocolViolation as e:
            logger.error(f"Protocol violation: {e}")
            self._abort()
            raise
        except RunAborted as e:
            logger.critical(f"Run aborted by worker {e.source!r}, stopping the others")
            self._abort(exclude=e.source)
            raise

        logger.info(f"Global histogram contains {len(self.global_histogram)} unique words")
        return self.global_histogram

    def _abort(self, exclude: Optional[Hashable] = None):
        if self.transport is None:
            return
        peers = [w for w, state in self.states.items()
                 if state != WorkerState.COLLECTED and w != exclude]
        self.transport.abort(peers)

    def _run_single_process(self):
        logger.info("Running in single process mode")
        if not len(self.task_list):
            logger.info("No files to process")

        task = self.task_list.next_task()
        while task is not None:
            result = count_words_in_file(task.path, self.chunk_size)
            if isinstance(result, FileUnavailable):
                logger.warning(f"Could not process file {task.path}: {result.reason}")
                self.unavailable.append(result)
            else:
                merge(self.global_histogram, result)
            task = self.task_list.next_task()

    def _run_distributed(self):
        logger.info(f"Dispatching {len(self.task_list)} files to {len(self.workers)} workers")
        if not len(self.task_list):
            logger.info("No files to process, signalling workers to terminate")

        # Every worker gets exactly one initial message
        for worker in self.workers:
            self._dispatch_or_terminate(worker)

        while self._outstanding():
            message = self.transport.recv(ANY_SOURCE, ANY_TAG)
            self._handle_ready(message)

    def _outstanding(self) -> int:
        return sum(1 for state in self.states.values() if state != WorkerState.COLLECTED)

    def _handle_ready(self, message: Message):
        expect(message, Tag.READY)
        worker = message.source
        if worker not in self.states:
            raise ProtocolViolation(f"READY from unknown participant {worker!r}",
                                    source=worker, tag=message.tag)
        self._transition(worker, WorkerState.IDLE)
        self._dispatch_or_terminate(worker)

    def _dispatch_or_terminate(self, worker: Hashable):
        task = self.task_list.next_task()
        if task is not None:
            self._transition(worker, WorkerState.ASSIGNED)
            self.transport.send(worker, Tag.TASK, task.path)
            self.tasks_per_worker[worker] += 1
            logger.debug(f"Task {task.index} ({task.path}) -> worker {worker!r}")
            return

        self._transition(worker, WorkerState.TERMINATING)
        self.transport.send(worker, Tag.TERMINATE)
        histogram = self._drain(worker)
        merge(self.global_histogram, histogram)
        self._transition(worker, WorkerState.COLLECTED)
        logger.info(
            f"Collected worker {worker!r}: {len(histogram)} unique words "
            f"({self._outstanding() - 1} workers still running)"
        )

    def _drain(self, worker: Hashable) -> Histogram:
        """Receive one worker's final histogram: count, then word/frequency pairs."""
        count = expect(self.transport.recv(source=worker), Tag.HIST_COUNT, int)
        if count < 0:
            raise ProtocolViolation(f"Negative entry count {count} from {worker!r}",
                                    source=worker, tag=Tag.HIST_COUNT)

        received = Histogram()
        for _ in range(count):
            word = expect(self.transport.recv(source=worker), Tag.HIST_WORD, str)
            frequency = expect(self.transport.recv(source=worker), Tag.HIST_FREQ, int)
            try:
                received.add(word, frequency)
            except ValueError as e:
                raise ProtocolViolation(f"Bad histogram entry from {worker!r}: {e}",
                                        source=worker, tag=Tag.HIST_FREQ)
        return received

    def _transition(self, worker: Hashable, new_state: WorkerState):
        current = self.states[worker]
        if new_state not in TRANSITIONS[current]:
            raise ProtocolViolation(
                f"Worker {worker!r} cannot go from {current.value} to {new_state.value}",
                source=worker
            )
        self.states[worker] = new_state
