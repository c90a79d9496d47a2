"""
Jira Toolkit package.

A thin client over the Jira Cloud REST API: authenticated requests,
paginated JQL search, and helpers to flatten, export and analyze
issue data.
"""

__version__ = '1.0.0'
__description__ = 'Jira REST API helpers for querying and exporting issue data'

from .client import JiraClient, build_auth_header, create_client
from .config import Config, load_config
from .exceptions import (
    ConfigError,
    JiraApiError,
    JiraToolkitError,
    JiraTransportError,
)
from .helpers import (
    get_issue,
    get_issue_changelog,
    get_project_statuses,
    list_custom_fields,
    list_fields,
    list_projects,
    search_issues,
)
from .transformer import extract_fields, flatten_value, get_path

__all__ = [
    'Config',
    'load_config',
    'JiraClient',
    'build_auth_header',
    'create_client',
    'ConfigError',
    'JiraApiError',
    'JiraToolkitError',
    'JiraTransportError',
    'search_issues',
    'get_issue',
    'get_issue_changelog',
    'list_fields',
    'list_custom_fields',
    'list_projects',
    'get_project_statuses',
    'extract_fields',
    'flatten_value',
    'get_path',
]
