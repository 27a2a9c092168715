"""
Unit tests for the CSV report
"""

import os

from wcdist.common.histogram import Histogram
from wcdist.common.tokenizer import count_words
from wcdist.coordinator.reporter import CSV_HEADER, format_csv, sorted_entries, write_csv


class TestReporter:

    def test_header_only_for_empty_histogram(self):
        assert format_csv(Histogram()) == 'word,frequency\n'

    def test_rows_sorted_bytewise(self):
        histogram = count_words("zebra apple Mango 10 9 apple")
        assert format_csv(histogram) == (
            'word,frequency\n'
            '10,1\n'
            '9,1\n'
            'apple,2\n'
            'mango,1\n'
            'zebra,1\n'
        )

    def test_sorted_entries(self):
        histogram = Histogram([('b', 2), ('a', 1)])
        assert sorted_entries(histogram) == [('a', 1), ('b', 2)]

    def test_order_independent_of_insertion(self):
        first = Histogram([('x', 1), ('y', 2), ('z', 3)])
        second = Histogram([('z', 3), ('x', 1), ('y', 2)])
        assert format_csv(first) == format_csv(second)

    def test_write_csv_overwrites(self, temp_dir):
        path = os.path.join(temp_dir, 'word_frequencies.csv')
        with open(path, 'w') as f:
            f.write('stale content that is longer than the report\n' * 10)

        write_csv(Histogram([('fox', 2)]), path)

        with open(path) as f:
            assert f.read() == 'word,frequency\nfox,2\n'

    def test_header_constant(self):
        assert ','.join(CSV_HEADER) == 'word,frequency'
