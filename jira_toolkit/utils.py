"""
Utility functions for the toolkit.

Includes logging setup, Jira timestamp parsing and file helpers.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import colorlog

JIRA_DATETIME_FORMATS = (
    '%Y-%m-%dT%H:%M:%S.%f%z',
    '%Y-%m-%dT%H:%M:%S%z',
    '%Y-%m-%d',
)


def setup_logging(config) -> logging.Logger:
    """
    Set up logging with console and optional file handlers.

    Args:
        config: Configuration object

    Returns:
        Configured logger
    """
    log_level = getattr(logging, str(config.log_level).upper(), logging.INFO)
    log_format = config.get(
        'logging.format',
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Console handler with colors; stderr keeps stdout clean for exports
    console_handler = colorlog.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(colorlog.ColoredFormatter(
        '%(log_color)s%(levelname)-8s%(reset)s %(message)s',
        log_colors={
            'DEBUG': 'cyan',
            'INFO': 'green',
            'WARNING': 'yellow',
            'ERROR': 'red',
            'CRITICAL': 'red,bg_white',
        }
    ))

    logger = logging.getLogger('jira_toolkit')
    logger.setLevel(log_level)
    logger.handlers.clear()
    logger.addHandler(console_handler)

    if config.log_dir:
        log_dir = Path(config.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime('%Y%m%d')
        log_file = log_dir / f"jira_toolkit_{timestamp}.log"

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(log_format))
        logger.addHandler(file_handler)
        logger.debug(f"Logging to file: {log_file}")

    # Suppress noisy libraries
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('requests').setLevel(logging.WARNING)

    return logger


def parse_jira_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a Jira timestamp.

    Args:
        value: Timestamp such as '2024-01-02T03:04:05.000+0000'

    Returns:
        datetime (timezone-aware unless date-only) or None if unparsable
    """
    if not value or not isinstance(value, str):
        return None

    for fmt in JIRA_DATETIME_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue

    return None


def calculate_file_size(file_path: str) -> str:
    """
    Calculate human-readable file size.

    Args:
        file_path: Path to file

    Returns:
        Formatted file size string
    """
    try:
        size = Path(file_path).stat().st_size
    except OSError:
        return "Unknown"

    for unit in ['B', 'KB', 'MB', 'GB']:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0

    return f"{size:.2f} TB"


def write_jsonl(records: Iterable[Dict[str, Any]], file_path: str, append: bool = False) -> int:
    """
    Write records to a JSONL file.

    Args:
        records: Dictionaries to write, one per line
        file_path: Output file path
        append: Whether to append or overwrite

    Returns:
        Number of records written
    """
    mode = 'a' if append else 'w'
    count = 0

    with open(file_path, mode, encoding='utf-8') as f:
        for record in records:
            json.dump(record, f, ensure_ascii=False)
            f.write('\n')
            count += 1

    return count
