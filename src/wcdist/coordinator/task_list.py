"""
Task list: the ordered files to count and the dispatch cursor over them.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

from wcdist.common.errors import TaskListError
from wcdist.config import MAX_FILES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Task:
    """One input file, identified by its position in the task list."""
    index: int
    path: str


class TaskList:
    """Immutable file paths plus a cursor that only moves forward."""

    def __init__(self, paths: Sequence[str]):
        self.paths: Tuple[str, ...] = tuple(paths)
        self._cursor = 0

    def next_task(self) -> Optional[Task]:
        """Take the next undispatched task, or None when all are dispatched."""
        if self._cursor >= len(self.paths):
            return None
        task = Task(index=self._cursor, path=self.paths[self._cursor])
        self._cursor += 1
        return task

    @property
    def dispatched(self) -> int:
        return self._cursor

    @property
    def remaining(self) -> int:
        return len(self.paths) - self._cursor

    def __len__(self) -> int:
        return len(self.paths)

    def __iter__(self):
        return (Task(index, path) for index, path in enumerate(self.paths))


def parse_task_list(lines: Iterable[str], max_files: int = MAX_FILES) -> TaskList:
    """
    Build a task list from file-list lines.

    Trailing line endings are stripped and blank lines skipped. At most
    max_files paths are kept.
    """
    paths = []
    dropped = 0
    for line in lines:
        path = line.rstrip('\r\n')
        if not path:
            continue
        if len(paths) >= max_files:
            dropped += 1
            continue
        paths.append(path)

    if dropped:
        logger.warning(f"File list holds more than {max_files} entries; ignoring {dropped}")
    return TaskList(paths)


def load_task_list(filelist_path: str, max_files: int = MAX_FILES) -> TaskList:
    """
    Load the newline-delimited file list.

    Raises:
        TaskListError: If the file list cannot be read
    """
    try:
        with open(filelist_path, 'r', encoding='utf-8', newline='') as f:
            task_list = parse_task_list(f, max_files)
    except (OSError, UnicodeDecodeError) as e:
        raise TaskListError(f"Cannot read file list {filelist_path}: {e}")

    logger.info(f"Loaded {len(task_list)} files from {filelist_path}")
    return task_list
