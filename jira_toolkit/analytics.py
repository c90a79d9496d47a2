"""
Issue analytics.

Aggregates a list of issues into counts by status, assignee, priority and
type, plus the average age in days.
"""

from collections import Counter
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from .transformer import get_path
from .utils import parse_jira_datetime

UNASSIGNED = 'Unassigned'


def _age_days(created: Optional[str], now: datetime) -> Optional[int]:
    created_at = parse_jira_datetime(created)
    if created_at is None:
        return None
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return (now - created_at).days


def analyze_issues(
    issues: List[Mapping[str, Any]],
    now: Optional[datetime] = None
) -> Dict[str, Any]:
    """
    Calculate statistics from issues.

    Args:
        issues: Issues with status, assignee, priority, issuetype and created
        now: Reference time for ages (default: current UTC time)

    Returns:
        Dictionary with total, by_status, by_assignee, by_priority, by_type,
        unassigned and avg_age_days
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    by_status: Counter = Counter()
    by_assignee: Counter = Counter()
    by_priority: Counter = Counter()
    by_type: Counter = Counter()
    ages = []

    for issue in issues:
        fields = issue.get('fields') or {}

        by_status[get_path(fields, 'status.name') or 'Unknown'] += 1
        by_assignee[get_path(fields, 'assignee.displayName') or UNASSIGNED] += 1
        by_priority[get_path(fields, 'priority.name') or 'None'] += 1
        by_type[get_path(fields, 'issuetype.name') or 'Unknown'] += 1

        age = _age_days(fields.get('created'), now)
        if age is not None:
            ages.append(age)

    return {
        'total': len(issues),
        'by_status': dict(by_status),
        'by_assignee': dict(by_assignee),
        'by_priority': dict(by_priority),
        'by_type': dict(by_type),
        'unassigned': by_assignee.get(UNASSIGNED, 0),
        'avg_age_days': round(sum(ages) / len(ages)) if ages else 0,
    }


def _format_section(title: str, counts: Dict[str, int], total: int,
                    limit: Optional[int] = None) -> List[str]:
    lines = [f"\n--- {title} ---"]
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    if limit is not None:
        ranked = ranked[:limit]

    for name, count in ranked:
        percentage = (count / total * 100) if total > 0 else 0
        lines.append(f"  {name}: {count} ({percentage:.1f}%)")

    return lines


def format_stats(stats: Dict[str, Any], top_assignees: int = 10) -> str:
    """
    Render statistics as a readable report.

    Args:
        stats: Output of analyze_issues
        top_assignees: Number of assignees to list

    Returns:
        Multi-line report
    """
    total = stats['total']
    rule = '=' * 80

    lines = [
        rule,
        'ISSUE ANALYTICS',
        rule,
        f"\nTotal Issues: {total}",
        f"Average Age: {stats['avg_age_days']} days",
        f"Unassigned: {stats['unassigned']}",
    ]
    lines += _format_section('By Status', stats['by_status'], total)
    lines += _format_section(
        f"By Assignee (Top {top_assignees})",
        stats['by_assignee'],
        total,
        limit=top_assignees
    )
    lines += _format_section('By Priority', stats['by_priority'], total)
    lines += _format_section('By Type', stats['by_type'], total)
    lines.append('\n' + rule)

    return '\n'.join(lines)
