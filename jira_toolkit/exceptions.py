"""
Exception types raised by the toolkit.

Three failure kinds reach the caller:
- ConfigError: required configuration missing or invalid (raised before
  any network activity)
- JiraApiError: the server answered with a non-success status
- JiraTransportError: the request never got a response (DNS, refused
  connection, timeout)
"""

from typing import Any, List, Optional


class JiraToolkitError(Exception):
    """Base class for all toolkit errors."""


class ConfigError(JiraToolkitError):
    """
    Raised when configuration is missing or invalid.
    
    Attributes:
        missing: Names of required settings that were not supplied
    """
    
    def __init__(self, message: str, missing: Optional[List[str]] = None):
        super().__init__(message)
        self.missing = list(missing or [])


class JiraApiError(JiraToolkitError):
    """
    Raised for a non-success HTTP response from Jira.
    
    Attributes:
        status_code: HTTP status code
        url: Requested URL
        payload: Decoded error body, raw response text, or None
    """
    
    def __init__(
        self,
        status_code: int,
        url: str,
        payload: Any = None
    ):
        self.status_code = status_code
        self.url = url
        self.payload = payload
        super().__init__(self._build_message())
    
    def _build_message(self) -> str:
        details = []
        
        if isinstance(self.payload, dict):
            details.extend(self.payload.get('errorMessages') or [])
            errors = self.payload.get('errors') or {}
            if isinstance(errors, dict):
                details.extend(f"{field}: {msg}" for field, msg in errors.items())
        elif isinstance(self.payload, str) and self.payload.strip():
            details.append(self.payload.strip()[:200])
        
        if details:
            return f"HTTP {self.status_code} for {self.url}: {'; '.join(details)}"
        return f"HTTP {self.status_code} for {self.url}"


class JiraTransportError(JiraToolkitError):
    """
    Raised when a request fails below the HTTP layer.
    
    The original requests exception is chained as __cause__.
    """
    
    def __init__(self, url: str, message: str):
        super().__init__(f"Request to {url} failed: {message}")
        self.url = url
