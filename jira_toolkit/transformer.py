"""
Data transformation module.

Flattens nested Jira issue data into plain records suitable for export
and analysis, using dotted field paths such as 'status.name'.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

logger = logging.getLogger('jira_toolkit.transformer')

FieldPath = Union[str, Sequence[Union[str, int]]]

# Keys tried, in order, when rendering a nested Jira object as text
DISPLAY_KEYS = ('displayName', 'name', 'value', 'key')


def _split_path(path: FieldPath) -> List[Union[str, int]]:
    if isinstance(path, str):
        return path.split('.') if path else []
    return list(path)


def get_path(value: Any, path: FieldPath) -> Optional[Any]:
    """
    Look up a nested value by path.

    Mappings are indexed by key, sequences by integer index (a segment
    like '0' works on lists). Any missing segment, or an attempt to descend
    into a scalar, yields None instead of raising.

    Args:
        value: Tree of mappings, sequences and scalars
        path: Dotted string ('fixVersions.0.name') or list of segments

    Returns:
        Value at path, or None if absent

    Example:
        >>> get_path({'status': {'name': 'Open'}}, 'status.name')
        'Open'
    """
    current = value

    for segment in _split_path(path):
        if current is None:
            return None

        if isinstance(current, Mapping):
            current = current.get(segment if isinstance(segment, str) else str(segment))
        elif isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
            try:
                index = int(segment)
            except (TypeError, ValueError):
                return None
            if not -len(current) <= index < len(current):
                return None
            current = current[index]
        else:
            return None

    return current


def extract_fields(
    issues: Iterable[Mapping[str, Any]],
    field_paths: Sequence[FieldPath]
) -> List[Dict[str, Any]]:
    """
    Extract specific field values from issues.

    Paths are resolved against each issue's 'fields' mapping. The input is
    not modified and output order follows input order.

    Args:
        issues: Issues as returned by the search API
        field_paths: Dotted paths to extract (e.g., ['status.name'])

    Returns:
        One flat dict per issue: {'key': ..., <path>: value-or-None, ...}
    """
    labels = [
        path if isinstance(path, str) else '.'.join(str(p) for p in path)
        for path in field_paths
    ]

    records = []
    for issue in issues:
        fields = issue.get('fields')
        record: Dict[str, Any] = {'key': issue.get('key')}

        for label, path in zip(labels, field_paths):
            record[label] = get_path(fields, path)

        records.append(record)

    logger.debug(f"Extracted {len(labels)} fields from {len(records)} issues")
    return records


def flatten_value(value: Any) -> str:
    """
    Render an extracted value as a single text cell.

    Args:
        value: Scalar, Jira object, or list of either

    Returns:
        '' for None, the display name of a Jira object, members of a list
        joined by ', ', or str(value)
    """
    if value is None:
        return ''

    if isinstance(value, Mapping):
        for key in DISPLAY_KEYS:
            if value.get(key) is not None:
                return str(value[key])
        return str(dict(value))

    if isinstance(value, (list, tuple)):
        return ', '.join(flatten_value(item) for item in value)

    if isinstance(value, bool):
        return 'true' if value else 'false'

    return str(value)
