"""
Transport module for the Jira REST API.

This module handles:
- Basic-Auth header construction
- Session setup with the fixed request headers
- GET requests returning decoded JSON
- Mapping HTTP and network failures to toolkit exceptions
"""

import base64
import logging
from typing import Any, Dict, Optional

import requests

from .config import Config
from .exceptions import JiraApiError, JiraTransportError

logger = logging.getLogger('jira_toolkit.client')

USER_AGENT = 'jira-toolkit/1.0'


def build_auth_header(email: str, api_token: str) -> str:
    """
    Build the Basic-Auth header value for an Atlassian account.

    Args:
        email: Account email
        api_token: Atlassian API token

    Returns:
        Header value, e.g. 'Basic dXNlckBleGFtcGxlLmNvbTp0b2tlbg=='
    """
    credentials = f"{email}:{api_token}".encode('utf-8')
    return f"Basic {base64.b64encode(credentials).decode('ascii')}"


class JiraClient:
    """
    Authenticated handle on a Jira instance.

    Every request goes through a single requests.Session carrying the
    Authorization header. Failures are never retried: a non-success status
    raises JiraApiError and a network failure raises JiraTransportError.
    """

    def __init__(self, config: Config):
        """
        Initialize Jira client.

        Args:
            config: Validated configuration object
        """
        self.config = config
        self.base_url = config.jira_host + config.api_path
        self.timeout = config.request_timeout

        self.session = self._create_session()

        # Statistics
        self.stats = {
            'requests_made': 0,
            'requests_failed': 0,
        }

    def _create_session(self) -> requests.Session:
        """
        Create requests session with authentication headers.

        Returns:
            Configured requests.Session
        """
        session = requests.Session()

        session.headers.update({
            'Authorization': build_auth_header(
                self.config.jira_email,
                self.config.jira_api_token
            ),
            'User-Agent': self.config.get('jira.user_agent', USER_AGENT),
            'Accept': 'application/json',
            'Content-Type': 'application/json'
        })

        return session

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Perform a GET request against the API.

        Args:
            path: Path relative to the API prefix (e.g., '/search')
            params: Query parameters

        Returns:
            Decoded JSON response body

        Raises:
            JiraApiError: On a non-success HTTP status
            JiraTransportError: On a network-level failure
        """
        url = self.base_url + path
        self.stats['requests_made'] += 1
        logger.debug(f"GET {url} params={params}")

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            self.stats['requests_failed'] += 1
            logger.error(f"Request failed for {url}: {e}")
            raise JiraTransportError(url, str(e)) from e

        if not response.ok:
            self.stats['requests_failed'] += 1
            payload = self._error_payload(response)
            logger.error(
                f"Jira returned {response.status_code} for {url}: {payload}"
            )
            raise JiraApiError(response.status_code, url, payload)

        try:
            return response.json()
        except ValueError as e:
            self.stats['requests_failed'] += 1
            logger.error(f"Invalid JSON in response from {url}: {e}")
            raise JiraTransportError(url, f"invalid JSON response: {e}") from e

    @staticmethod
    def _error_payload(response: requests.Response) -> Any:
        """Return the decoded error body, the raw text, or None."""
        try:
            return response.json()
        except ValueError:
            return response.text or None

    def get_stats(self) -> Dict[str, int]:
        return self.stats.copy()

    def close(self) -> None:
        if self.session:
            self.session.close()
            logger.debug(f"Session closed for {self.base_url}")

    def __enter__(self) -> 'JiraClient':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"JiraClient(base_url={self.base_url!r})"


def create_client(config: Config) -> JiraClient:
    """
    Create an authenticated Jira client.

    Args:
        config: Validated configuration object

    Returns:
        JiraClient bound to config.jira_host
    """
    return JiraClient(config)
