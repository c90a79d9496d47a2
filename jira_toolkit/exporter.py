"""Export flattened issue records to CSV and JSONL"""

import csv
import io
import logging
from typing import Any, Dict, List, Sequence

from .transformer import flatten_value
from .utils import write_jsonl

logger = logging.getLogger('jira_toolkit.exporter')

# Field projection requested from the search API for a default export
DEFAULT_SEARCH_FIELDS = 'summary,status,assignee,reporter,created,updated,priority,issuetype'

DEFAULT_EXPORT_FIELDS = [
    'summary',
    'status.name',
    'assignee.displayName',
    'reporter.displayName',
    'created',
    'updated',
    'priority.name',
    'issuetype.name',
]


def to_csv(rows: Sequence[Dict[str, Any]]) -> str:
    """
    Convert flat records to a CSV string.

    The header comes from the first record's keys. Every cell is quoted;
    absent values become empty strings.

    Args:
        rows: Records as produced by extract_fields

    Returns:
        CSV text without a trailing newline, or '' for no rows
    """
    if not rows:
        return ''

    headers = list(rows[0].keys())
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator='\n')

    writer.writerow(headers)
    for row in rows:
        writer.writerow([flatten_value(row.get(header)) for header in headers])

    return buffer.getvalue().rstrip('\n')


def write_csv(rows: Sequence[Dict[str, Any]], file_path: str) -> int:
    """
    Write flat records to a CSV file.

    Returns:
        Number of data rows written
    """
    content = to_csv(rows)

    with open(file_path, 'w', encoding='utf-8', newline='') as f:
        if content:
            f.write(content + '\n')

    logger.info(f"Exported {len(rows)} rows to {file_path}")
    return len(rows)


def export_records(rows: List[Dict[str, Any]], file_path: str, fmt: str = 'csv') -> int:
    """
    Write records in the requested format.

    Args:
        rows: Flat records
        file_path: Output file path
        fmt: 'csv' or 'jsonl'

    Returns:
        Number of records written

    Raises:
        ValueError: For an unknown format
    """
    if fmt == 'csv':
        return write_csv(rows, file_path)
    if fmt == 'jsonl':
        count = write_jsonl(rows, file_path)
        logger.info(f"Exported {count} records to {file_path}")
        return count
    raise ValueError(f"Unsupported export format: {fmt}")
