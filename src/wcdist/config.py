"""
Run configuration with environment-variable defaults.
"""

import os
from dataclasses import dataclass

from wcdist.common.tokenizer import DEFAULT_CHUNK_SIZE

# Longest file list the coordinator will load
MAX_FILES = 100


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None or value == '':
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be an integer, got {value!r}")


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value is None or value == '':
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be a number, got {value!r}")


@dataclass
class Settings:
    """Settings shared by every entry point; CLI flags override these."""
    filelist: str = 'filelist.txt'
    output: str = 'word_frequencies.csv'
    max_files: int = MAX_FILES
    workers: int = 0
    coordinator_port: int = 50051
    worker_port: int = 50052
    connect_timeout: float = 10.0
    chunk_size: int = DEFAULT_CHUNK_SIZE
    log_level: str = 'INFO'
    metrics_path: str = ''

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from WCDIST_* environment variables."""
        defaults = cls()
        return cls(
            filelist=os.environ.get('WCDIST_FILELIST', defaults.filelist),
            output=os.environ.get('WCDIST_OUTPUT', defaults.output),
            max_files=_env_int('WCDIST_MAX_FILES', defaults.max_files),
            workers=_env_int('WCDIST_WORKERS', defaults.workers),
            coordinator_port=_env_int('WCDIST_COORDINATOR_PORT', defaults.coordinator_port),
            worker_port=_env_int('WCDIST_WORKER_PORT', defaults.worker_port),
            connect_timeout=_env_float('WCDIST_CONNECT_TIMEOUT', defaults.connect_timeout),
            chunk_size=_env_int('WCDIST_CHUNK_SIZE', defaults.chunk_size),
            log_level=os.environ.get('WCDIST_LOG_LEVEL', defaults.log_level).upper(),
            metrics_path=os.environ.get('WCDIST_METRICS', defaults.metrics_path),
        )
