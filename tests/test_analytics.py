"""Tests for issue analytics and utilities."""

from datetime import datetime, timezone

import pytest

from jira_toolkit.analytics import analyze_issues, format_stats
from jira_toolkit.utils import calculate_file_size, parse_jira_datetime

NOW = datetime(2024, 1, 31, tzinfo=timezone.utc)


def issue(key, status=None, assignee=None, priority=None, issue_type=None, created=None):
    fields = {'created': created}
    if status:
        fields['status'] = {'name': status}
    if assignee:
        fields['assignee'] = {'displayName': assignee}
    else:
        fields['assignee'] = None
    if priority:
        fields['priority'] = {'name': priority}
    if issue_type:
        fields['issuetype'] = {'name': issue_type}
    return {'key': key, 'fields': fields}


@pytest.fixture
def issues():
    return [
        issue('P-1', 'Open', 'Jane', 'High', 'Bug', '2024-01-01T10:00:00.000+0000'),
        issue('P-2', 'Open', None, 'Low', 'Task', '2024-01-21T10:00:00.000+0000'),
        issue('P-3', 'Done', 'Jane', None, 'Bug', '2024-01-30T23:00:00.000+0000'),
        issue('P-4', None, 'Sam', 'High', None, 'not a date'),
    ]


class TestAnalyzeIssues:
    """Test aggregation."""

    def test_counts(self, issues):
        stats = analyze_issues(issues, now=NOW)

        assert stats['total'] == 4
        assert stats['by_status'] == {'Open': 2, 'Done': 1, 'Unknown': 1}
        assert stats['by_assignee'] == {'Jane': 2, 'Unassigned': 1, 'Sam': 1}
        assert stats['by_priority'] == {'High': 2, 'Low': 1, 'None': 1}
        assert stats['by_type'] == {'Bug': 2, 'Task': 1, 'Unknown': 1}
        assert stats['unassigned'] == 1

    def test_average_age_skips_unparsable_dates(self, issues):
        # Ages: 29, 9, 0 days
        stats = analyze_issues(issues, now=NOW)
        assert stats['avg_age_days'] == 13

    def test_empty(self):
        stats = analyze_issues([], now=NOW)

        assert stats['total'] == 0
        assert stats['avg_age_days'] == 0
        assert stats['by_status'] == {}

    def test_naive_now(self, issues):
        stats = analyze_issues(issues, now=datetime(2024, 1, 31))
        assert stats['avg_age_days'] == 13


class TestFormatStats:
    """Test the text report."""

    def test_report_sections(self, issues):
        report = format_stats(analyze_issues(issues, now=NOW), top_assignees=1)

        assert 'Total Issues: 4' in report
        assert 'Average Age: 13 days' in report
        assert '--- By Status ---' in report
        assert '  Open: 2 (50.0%)' in report
        assert '--- By Assignee (Top 1) ---' in report
        assert '  Jane: 2 (50.0%)' in report
        assert 'Sam' not in report

    def test_status_sorted_descending(self, issues):
        report = format_stats(analyze_issues(issues, now=NOW))
        assert report.index('Open: 2') < report.index('Done: 1')

    def test_empty_report(self):
        report = format_stats(analyze_issues([], now=NOW))
        assert 'Total Issues: 0' in report


class TestUtils:
    """Test utility functions."""

    def test_parse_jira_datetime(self):
        parsed = parse_jira_datetime('2024-01-02T03:04:05.123+0000')

        assert parsed == datetime(2024, 1, 2, 3, 4, 5, 123000, tzinfo=timezone.utc)

    def test_parse_jira_date_only(self):
        assert parse_jira_datetime('2024-01-02') == datetime(2024, 1, 2)

    @pytest.mark.parametrize('value', [None, '', 'yesterday', 42])
    def test_parse_invalid(self, value):
        assert parse_jira_datetime(value) is None

    def test_calculate_file_size(self, tmp_path):
        path = tmp_path / 'data.txt'
        path.write_bytes(b'x' * 2048)

        assert calculate_file_size(str(path)) == '2.00 KB'
        assert calculate_file_size(str(tmp_path / 'absent')) == 'Unknown'
