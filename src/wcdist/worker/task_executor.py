"""
TaskExecutor, counts the words of assigned files into the worker's local histogram.
"""

import time
import logging
from typing import List, Union

import psutil

from wcdist.common.histogram import Histogram, merge
from wcdist.common.tokenizer import DEFAULT_CHUNK_SIZE, FileUnavailable, count_words_in_file

logger = logging.getLogger(__name__)


class TaskExecutor:
    """Runs file-count tasks and accumulates their results locally."""

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        self.chunk_size = chunk_size
        self.histogram = Histogram()
        self.files_processed = 0
        self.unavailable: List[FileUnavailable] = []
        self.process = psutil.Process()

    def execute(self, path: str) -> Union[Histogram, FileUnavailable]:
        """
        Count one file and merge its words into the local histogram.

        Args:
            path: File to count

        Returns:
            The single-file histogram, or FileUnavailable if the file could not be read
        """
        start_time = time.time()
        result = count_words_in_file(path, self.chunk_size)

        if isinstance(result, FileUnavailable):
            logger.warning(f"Could not process file {path}: {result.reason}")
            self.unavailable.append(result)
            return result

        merge(self.histogram, result)
        self.files_processed += 1

        execution_time = int((time.time() - start_time) * 1000)
        logger.info(f"Counted {path}: {result.total()} words, {len(result)} unique in {execution_time}ms")
        return result

    def take_histogram(self) -> Histogram:
        """Hand over the local histogram; the executor keeps an empty one."""
        histogram, self.histogram = self.histogram, Histogram()
        return histogram

    def get_memory_usage(self) -> int:
        """Get current memory usage in bytes."""
        return self.process.memory_info().rss
