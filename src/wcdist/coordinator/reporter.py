"""
Reporter: writes the global histogram as a sorted CSV file.
"""

import io
import csv
import logging
from typing import List, Tuple

from wcdist.common.histogram import Histogram

logger = logging.getLogger(__name__)

CSV_HEADER = ('word', 'frequency')


def sorted_entries(histogram: Histogram) -> List[Tuple[str, int]]:
    """Entries in ascending bytewise order of the word."""
    return histogram.sorted_items()


def _write_rows(f, histogram: Histogram):
    writer = csv.writer(f, lineterminator='\n')
    writer.writerow(CSV_HEADER)
    writer.writerows(sorted_entries(histogram))


def format_csv(histogram: Histogram) -> str:
    """Render the report in memory."""
    buffer = io.StringIO()
    _write_rows(buffer, histogram)
    return buffer.getvalue()


def write_csv(histogram: Histogram, csv_path: str):
    """Write the report, replacing any previous file at csv_path."""
    with open(csv_path, 'w', encoding='utf-8', newline='') as f:
        _write_rows(f, histogram)
    logger.info(f"Output written to {csv_path} ({len(histogram)} rows)")
