"""
Tokenizer: turns raw file bytes into case-folded alphanumeric words.
"""

import io
import re
import logging
from dataclasses import dataclass
from typing import BinaryIO, Iterator, Union

from wcdist.common.histogram import MAX_WORD_LEN, Histogram

logger = logging.getLogger(__name__)

# Only ASCII letters and digits form words; every other byte is a separator.
TOKEN_PATTERN = re.compile(rb'[A-Za-z0-9]+')
DEFAULT_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class FileUnavailable:
    """Outcome of counting a file that could not be opened or read."""
    path: str
    reason: str


def _fold(raw: bytes) -> str:
    return raw[:MAX_WORD_LEN].lower().decode('ascii')


def iter_tokens(stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[str]:
    """
    Yield the words of a binary stream in order.

    Tokens that straddle a chunk boundary are joined before being emitted,
    and a token pending at end of stream is still emitted.

    Args:
        stream: Binary file-like object
        chunk_size: Bytes read per call

    Yields:
        Lower-cased words of at most MAX_WORD_LEN characters
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    carry = b''
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        buffer = carry + chunk
        carry = b''
        for match in TOKEN_PATTERN.finditer(buffer):
            if match.end() == len(buffer):
                # May continue in the next chunk; only the prefix can survive truncation
                carry = match.group()[:MAX_WORD_LEN]
                break
            yield _fold(match.group())

    if carry:
        yield _fold(carry)


def count_stream(stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Histogram:
    """Build a histogram from a binary stream."""
    histogram = Histogram()
    for word in iter_tokens(stream, chunk_size):
        histogram.add(word)
    return histogram


def count_words(data: Union[bytes, str]) -> Histogram:
    """Build a histogram from in-memory content."""
    if isinstance(data, str):
        data = data.encode('utf-8')
    return count_stream(io.BytesIO(data))


def count_words_in_file(path: str,
                        chunk_size: int = DEFAULT_CHUNK_SIZE) -> Union[Histogram, FileUnavailable]:
    """
    Count the words of one file.

    A file that cannot be opened or read is reported as FileUnavailable
    instead of raising, so the caller can carry on with the other files.
    """
    try:
        with open(path, 'rb') as f:
            histogram = count_stream(f, chunk_size)
    except OSError as e:
        return FileUnavailable(path=path, reason=e.strerror or str(e))

    logger.debug(f"Counted {histogram.total()} words ({len(histogram)} unique) in {path}")
    return histogram
