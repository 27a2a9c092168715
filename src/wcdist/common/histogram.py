"""
Word histogram and the merge operation used to combine partial results.
"""

from typing import Dict, Iterable, Iterator, List, Optional, Tuple

# Usable characters per word; longer tokens are truncated to this prefix.
MAX_WORD_LEN = 99


def bound_word(word: str) -> str:
    """Truncate a word to MAX_WORD_LEN characters."""
    return word[:MAX_WORD_LEN]


class Histogram:
    """Multiset of words with their occurrence counts.

    Entries keep insertion order. Words are compared after truncation to
    MAX_WORD_LEN, so two long words sharing that prefix are the same entry.
    """

    def __init__(self, entries: Optional[Iterable[Tuple[str, int]]] = None):
        self._counts: Dict[str, int] = {}
        if entries is not None:
            for word, frequency in entries:
                self.add(word, frequency)

    def add(self, word: str, frequency: int = 1):
        """
        Count a word.

        Args:
            word: The token to count
            frequency: Occurrences to add (must be positive)

        Raises:
            ValueError: If frequency is not a positive integer or word is empty
        """
        if not word:
            raise ValueError("Cannot count an empty word")
        if not isinstance(frequency, int) or isinstance(frequency, bool) or frequency <= 0:
            raise ValueError(f"Frequency must be a positive integer, got {frequency!r}")
        key = bound_word(word)
        self._counts[key] = self._counts.get(key, 0) + frequency

    def merge(self, other: "Histogram") -> "Histogram":
        """Add every entry of other into this histogram and return self."""
        for word, frequency in other.items():
            self.add(word, frequency)
        return self

    def items(self) -> Iterator[Tuple[str, int]]:
        return iter(self._counts.items())

    def sorted_items(self) -> List[Tuple[str, int]]:
        """Entries ascending by the bytes of the word."""
        return sorted(self._counts.items(), key=lambda entry: entry[0].encode('utf-8'))

    def total(self) -> int:
        """Sum of all frequencies."""
        return sum(self._counts.values())

    def get(self, word: str, default: int = 0) -> int:
        return self._counts.get(bound_word(word), default)

    def to_dict(self) -> Dict[str, int]:
        return dict(self._counts)

    def __getitem__(self, word: str) -> int:
        return self._counts[bound_word(word)]

    def __contains__(self, word) -> bool:
        return isinstance(word, str) and bound_word(word) in self._counts

    def __iter__(self) -> Iterator[str]:
        return iter(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Histogram):
            return NotImplemented
        return self._counts == other._counts

    def __repr__(self) -> str:
        return f"Histogram({len(self)} words, {self.total()} occurrences)"


def merge(dest: Histogram, source: Histogram) -> Histogram:
    """
    Merge source into dest by adding each source frequency once.

    The result does not depend on the order in which partial histograms
    are merged.

    Returns:
        dest, for chaining
    """
    return dest.merge(source)


def merged(*histograms: Histogram) -> Histogram:
    """Combine any number of histograms into a new one."""
    result = Histogram()
    for histogram in histograms:
        merge(result, histogram)
    return result
