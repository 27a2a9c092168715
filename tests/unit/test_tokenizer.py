"""
Unit tests for the tokenizer
"""

import io
import os

import pytest

from wcdist.common.histogram import MAX_WORD_LEN
from wcdist.common.tokenizer import (
    FileUnavailable, count_stream, count_words, count_words_in_file, iter_tokens
)


class TestIterTokens:
    """Tests for splitting byte streams into words"""

    def test_splits_on_non_alphanumeric_bytes(self):
        """Punctuation and whitespace end tokens"""
        tokens = list(iter_tokens(io.BytesIO(b"The quick-brown fox. The Fox runs.")))
        assert tokens == ['the', 'quick', 'brown', 'fox', 'the', 'fox', 'runs']

    def test_consecutive_separators_produce_no_empty_tokens(self):
        tokens = list(iter_tokens(io.BytesIO(b"  ,,a;;  ;b\n\n\tc  ")))
        assert tokens == ['a', 'b', 'c']

    def test_digits_are_word_characters(self):
        tokens = list(iter_tokens(io.BytesIO(b"route66 42 x1y2")))
        assert tokens == ['route66', '42', 'x1y2']

    def test_pending_token_at_end_of_stream_is_emitted(self):
        tokens = list(iter_tokens(io.BytesIO(b"ends without separator")))
        assert tokens[-1] == 'separator'

    def test_non_ascii_bytes_are_separators(self):
        tokens = list(iter_tokens(io.BytesIO("café naïve".encode('utf-8'))))
        assert tokens == ['caf', 'na', 've']

    def test_empty_stream(self):
        assert list(iter_tokens(io.BytesIO(b""))) == []

    @pytest.mark.parametrize("chunk_size", [1, 2, 3, 5, 7, 64])
    def test_tokens_straddling_chunk_boundaries_are_joined(self, chunk_size):
        """Output does not depend on how the stream is chunked"""
        data = b"Hello, wonderful world! abcdefghij 12345"
        tokens = list(iter_tokens(io.BytesIO(data), chunk_size=chunk_size))
        assert tokens == ['hello', 'wonderful', 'world', 'abcdefghij', '12345']

    def test_rejects_non_positive_chunk_size(self):
        with pytest.raises(ValueError):
            list(iter_tokens(io.BytesIO(b"abc"), chunk_size=0))


class TestTruncation:
    """Tests for the word length bound"""

    def test_long_token_is_truncated(self):
        tokens = list(iter_tokens(io.BytesIO(b"A" * 250 + b" short")))
        assert tokens == ['a' * MAX_WORD_LEN, 'short']

    def test_truncation_independent_of_chunk_size(self):
        data = b"x" * 130 + b"y" * 20 + b" tail"
        expected = list(iter_tokens(io.BytesIO(data)))
        for chunk_size in (1, 10, 99, 100, 101):
            assert list(iter_tokens(io.BytesIO(data), chunk_size=chunk_size)) == expected

    def test_words_sharing_truncated_prefix_are_one_entry(self):
        prefix = "w" * MAX_WORD_LEN
        histogram = count_words(f"{prefix}alpha {prefix}beta")
        assert len(histogram) == 1
        assert histogram[prefix] == 2


class TestCounting:
    """Tests for building histograms"""

    def test_scenario_sentence(self):
        histogram = count_words("The quick brown fox. The Fox runs.")
        assert histogram.to_dict() == {'the': 2, 'quick': 1, 'brown': 1, 'fox': 2, 'runs': 1}

    def test_counting_is_idempotent(self, sample_text):
        assert count_words(sample_text) == count_words(sample_text)

    def test_count_stream_matches_count_words(self, sample_text):
        data = sample_text.encode('utf-8')
        assert count_stream(io.BytesIO(data), chunk_size=4) == count_words(data)

    def test_count_words_in_file(self, sample_input_file):
        histogram = count_words_in_file(sample_input_file)

        assert histogram['the'] == 4
        assert histogram['brown'] == 3
        assert histogram['lazy'] == 3
        assert histogram.total() == 32

    def test_missing_file_is_unavailable(self, temp_dir):
        path = os.path.join(temp_dir, 'does-not-exist.txt')
        result = count_words_in_file(path)

        assert isinstance(result, FileUnavailable)
        assert result.path == path
        assert result.reason

    def test_directory_is_unavailable(self, temp_dir):
        assert isinstance(count_words_in_file(temp_dir), FileUnavailable)
