"""
Shared fixtures for the test suite.

Run with: pytest tests/
"""

import logging
import os

import pytest

from jira_toolkit.config import Config
from jira_toolkit.exceptions import JiraApiError


SETTINGS = {
    'jira': {
        'host': 'https://example.atlassian.net',
        'email': 'dev@example.com',
        'api_token': 'secret-token',
    },
}


def make_issue(index: int, project: str = 'TEST') -> dict:
    return {
        'key': f"{project}-{index}",
        'fields': {'summary': f"Issue {index}"},
    }


class FakeJiraClient:
    """
    Stands in for JiraClient, serving synthetic search pages.

    Records every (path, params) call. Optionally omits 'total' from
    search pages (or from every page after the first) and fails with a
    JiraApiError on a given (1-based) request number.
    """

    def __init__(
        self,
        issues=None,
        include_total=True,
        total_on_first_page_only=False,
        fail_on_request=None,
        responses=None,
        config=None
    ):
        self.config = config or Config(SETTINGS)
        self.issues = list(issues or [])
        self.include_total = include_total
        self.total_on_first_page_only = total_on_first_page_only
        self.fail_on_request = fail_on_request
        self.responses = responses or {}
        self.calls = []

    def get(self, path, params=None):
        self.calls.append((path, dict(params or {})))

        if self.fail_on_request == len(self.calls):
            raise JiraApiError(503, self.config.jira_host + path, {'errorMessages': ['Unavailable']})

        if path == self.config.search_endpoint:
            start = params['startAt']
            size = params['maxResults']
            page = {
                'startAt': start,
                'maxResults': size,
                'issues': self.issues[start:start + size],
            }
            if self.include_total and not (self.total_on_first_page_only and start > 0):
                page['total'] = len(self.issues)
            return page

        return self.responses[path]

    @property
    def search_calls(self):
        return [params for path, params in self.calls if path == self.config.search_endpoint]

    def get_stats(self):
        return {'requests_made': len(self.calls), 'requests_failed': 0}

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


@pytest.fixture
def config():
    """Create test configuration."""
    return Config(SETTINGS)


@pytest.fixture
def sample_issue():
    """Create sample issue data."""
    return {
        'key': 'KAFKA-12345',
        'fields': {
            'summary': 'Improve consumer performance',
            'status': {'name': 'Open'},
            'priority': {'name': 'Major'},
            'issuetype': {'name': 'Improvement'},
            'created': '2023-01-01T00:00:00.000+0000',
            'updated': '2023-01-02T00:00:00.000+0000',
            'reporter': {'displayName': 'John Doe'},
            'assignee': {'displayName': 'Jane Smith'},
            'labels': ['performance', 'consumer'],
            'components': [{'name': 'consumer'}],
            'customfield_10010': None,
        }
    }


@pytest.fixture
def clean_env(monkeypatch):
    """Isolate os.environ from JIRA_* variables and .env side effects."""
    environ = {
        name: value for name, value in os.environ.items()
        if not name.startswith('JIRA_')
    }
    monkeypatch.setattr(os, 'environ', environ)
    return environ


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by setup_logging between tests."""
    yield
    logger = logging.getLogger('jira_toolkit')
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
