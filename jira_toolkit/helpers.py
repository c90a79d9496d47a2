"""
Helper functions for common Jira data operations.

Each helper takes a JiraClient, performs one logical operation and returns
the decoded API data. Failures are logged with the operation's context and
re-raised unchanged.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from .client import JiraClient

logger = logging.getLogger('jira_toolkit.helpers')

ALL_FIELDS = '*all'

Fields = Union[str, Sequence[str]]


def _fields_param(fields: Fields) -> str:
    if isinstance(fields, str):
        return fields
    return ','.join(fields) if fields else ALL_FIELDS


def search_issues(
    client: JiraClient,
    jql: str,
    fields: Fields = ALL_FIELDS,
    max_results: int = 100,
    on_page: Optional[Callable[[int, int], None]] = None
) -> List[Dict]:
    """
    Search for issues using JQL, fetching every page of results.

    Pages are requested one after another, advancing startAt by
    max_results. The loop stops when a page comes back shorter than
    max_results or when startAt reaches the reported total. The first
    non-zero total is kept even if later pages omit it. A server that
    omits total and returns exactly max_results issues on its last page
    costs one extra request for the empty page that follows.

    Args:
        client: Authenticated Jira client
        jql: JQL query string
        fields: Comma-separated field list, a list of field names, or '*all'
        max_results: Page size; passed through unchecked, Jira may cap it
        on_page: Called with (fetched_so_far, total) after every page

    Returns:
        All matching issues in server order

    Raises:
        ValueError: If jql is empty or max_results is not positive
        JiraApiError: If any page request is rejected
        JiraTransportError: If any page request fails in transit
    """
    if not jql or not jql.strip():
        raise ValueError("jql must be a non-empty query string")
    if isinstance(max_results, bool) or not isinstance(max_results, int) \
            or max_results < 1:
        raise ValueError(f"max_results must be a positive integer, got {max_results!r}")

    logger.info(f"Searching issues with JQL: {jql}")

    all_issues: List[Dict] = []
    start_at = 0
    total = 0
    fields_str = _fields_param(fields)

    try:
        while True:
            params = {
                'jql': jql,
                'startAt': start_at,
                'maxResults': max_results,
                'fields': fields_str,
            }

            page = client.get(client.config.search_endpoint, params)

            total = page.get('total') or total
            issues = page.get('issues') or []
            all_issues.extend(issues)
            start_at += max_results

            if total > 0:
                logger.info(f"Fetched {len(all_issues)} of {total} issues...")
            else:
                logger.info(f"Fetched {len(all_issues)} issues...")

            if on_page is not None:
                on_page(len(all_issues), total)

            if len(issues) < max_results:
                break
            if total and start_at >= total:
                break

    except Exception as e:
        logger.error(f"Error searching issues for JQL '{jql}': {e}")
        raise

    logger.info(f"Total issues fetched: {len(all_issues)}")
    return all_issues


def get_issue(
    client: JiraClient,
    issue_key: str,
    fields: Fields = ALL_FIELDS
) -> Dict:
    """
    Get a single issue by key.

    Args:
        client: Authenticated Jira client
        issue_key: Issue key (e.g., "PROJ-123")
        fields: Field projection (default: all)

    Returns:
        Issue data
    """
    try:
        return client.get(
            f"/issue/{issue_key}",
            {'fields': _fields_param(fields)}
        )
    except Exception as e:
        logger.error(f"Error fetching issue {issue_key}: {e}")
        raise


def get_issue_changelog(client: JiraClient, issue_key: str) -> Dict:
    """
    Get the change history of an issue.

    Args:
        client: Authenticated Jira client
        issue_key: Issue key (e.g., "PROJ-123")

    Returns:
        Changelog data ({'histories': [...], ...}), empty if not returned
    """
    try:
        data = client.get(f"/issue/{issue_key}", {'expand': 'changelog'})
    except Exception as e:
        logger.error(f"Error fetching changelog for {issue_key}: {e}")
        raise

    return data.get('changelog') or {}


def list_fields(client: JiraClient) -> List[Dict]:
    """Get the full field catalog, system and custom."""
    try:
        return client.get('/field')
    except Exception as e:
        logger.error(f"Error fetching fields: {e}")
        raise


def list_custom_fields(client: JiraClient) -> List[Dict]:
    """
    List all custom fields available in Jira.

    Useful for finding the customfield_NNNNN ids needed in queries.

    Args:
        client: Authenticated Jira client

    Returns:
        Custom field definitions
    """
    return [field for field in list_fields(client) if field.get('custom')]


def list_projects(client: JiraClient) -> List[Dict]:
    """Get all projects visible to the authenticated user."""
    try:
        return client.get('/project')
    except Exception as e:
        logger.error(f"Error fetching projects: {e}")
        raise


def get_project_statuses(client: JiraClient, project_key: str) -> List[Any]:
    """
    Get all statuses for a project, grouped by issue type.

    Args:
        client: Authenticated Jira client
        project_key: Project key

    Returns:
        List of issue types, each with its 'statuses'
    """
    try:
        return client.get(f"/project/{project_key}/statuses")
    except Exception as e:
        logger.error(f"Error fetching statuses for {project_key}: {e}")
        raise
