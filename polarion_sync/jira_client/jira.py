"""
Jira REST API Client.

Provides a small client for the Jira REST API (v2):
- Authentication (basic auth).
- Fetching a single issue by key.
- Paging through JQL search results.
- Asserting that an issue is an epic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests
from loguru import logger

EPIC_ISSUE_TYPE = "Epic"


class JiraClientError(Exception):
    """Raised when a Jira API operation fails."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NotAnEpicError(AssertionError):
    """Raised when an issue expected to be an epic is not one."""


@dataclass(frozen=True)
class Issue:
    """
    A Jira issue as returned by the REST API.

    Attributes:
        key: Issue key (e.g., "INTLY-1234").
        fields: Raw ``fields`` object of the issue.
    """

    key: str
    fields: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Issue":
        """Build an issue from a REST API issue object."""
        return cls(key=data["key"], fields=data.get("fields") or {})

    @property
    def summary(self) -> str:
        return self.fields.get("summary") or ""

    @property
    def issue_type(self) -> str:
        return (self.fields.get("issuetype") or {}).get("name", "")

    @property
    def status(self) -> str:
        return (self.fields.get("status") or {}).get("name", "")


def assert_epic(issue: Issue) -> None:
    """
    Assert that an issue is an epic.

    Raises:
        NotAnEpicError: If the issue type is not "Epic".
    """
    if issue.issue_type != EPIC_ISSUE_TYPE:
        raise NotAnEpicError(
            f"Issue {issue.key} is not an epic (issue type: "
            f"'{issue.issue_type or 'unknown'}')"
        )


@dataclass
class JiraConfig:
    """Configuration for the Jira API client."""

    base_url: str
    username: str = ""
    password: str = ""
    timeout_sec: int = 60
    verify_ssl: bool = True
    page_size: int = 50


class JiraClient:
    """
    Client for the Jira REST API.

    Usage::

        with JiraClient("https://issues.example.com", "user", "secret") as jira:
            epic = jira.find_issue("INTLY-100")
            assert_epic(epic)
            issues = jira.search('"Epic Link" = INTLY-100')
    """

    ENDPOINTS = {
        "issue": "/rest/api/2/issue/{key}",
        "search": "/rest/api/2/search",
    }

    SEARCH_FIELDS = "summary,status,issuetype"

    def __init__(
        self,
        base_url: str = "",
        username: str = "",
        password: str = "",
        timeout_sec: int = 60,
        verify_ssl: bool = True,
        config: Optional[JiraConfig] = None,
    ) -> None:
        """
        Initialize the Jira client.

        Args:
            base_url: Jira instance base URL.
            username: Username for basic auth.
            password: Password or API token for basic auth.
            timeout_sec: Request timeout in seconds.
            verify_ssl: Whether to verify SSL certificates.
            config: Optional JiraConfig dataclass (overrides individual params).
        """
        if config:
            self._config = config
        else:
            self._config = JiraConfig(
                base_url=base_url.rstrip("/"),
                username=username,
                password=password,
                timeout_sec=timeout_sec,
                verify_ssl=verify_ssl,
            )

        self._session: Optional[requests.Session] = None
        logger.debug(f"JiraClient initialized — url={self._config.base_url}")

    def browse_url(self, key: str) -> str:
        """Return the browser link of an issue."""
        return f"{self._config.base_url}/browse/{key}"

    def _get_session(self) -> requests.Session:
        """Get or create an HTTP session with basic auth."""
        if self._session is None:
            self._session = requests.Session()
            self._session.verify = self._config.verify_ssl
            self._session.headers.update({"Accept": "application/json"})
            self._session.auth = (self._config.username, self._config.password)
        return self._session

    def _request(self, method: str, endpoint: str, **kwargs: Any) -> Dict[str, Any]:
        """
        Make an authenticated API request.

        Raises:
            JiraClientError: If the request fails.
        """
        session = self._get_session()
        url = f"{self._config.base_url}{endpoint}"
        logger.debug(f"Jira API {method} {url}")

        try:
            response = session.request(
                method=method,
                url=url,
                timeout=self._config.timeout_sec,
                **kwargs,
            )
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            logger.error(f"Jira API HTTP error: {e} (status={status_code})")
            raise JiraClientError(
                f"Jira API request failed: {e}", status_code=status_code
            ) from e
        except requests.exceptions.ConnectionError as e:
            logger.error(f"Jira API connection error: {e}")
            raise JiraClientError(f"Cannot connect to Jira: {e}") from e
        except requests.exceptions.Timeout as e:
            logger.error(f"Jira API timeout: {e}")
            raise JiraClientError(
                f"Jira API request timed out after {self._config.timeout_sec}s"
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Jira API request error: {e}")
            raise JiraClientError(f"Jira request to {url} failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise JiraClientError(f"Invalid JSON response from {url}: {e}") from e

    def find_issue(self, key: str) -> Issue:
        """
        Fetch a single issue by key.

        Raises:
            JiraClientError: If the issue cannot be fetched.
        """
        logger.info(f"Fetching Jira issue: {key}")
        data = self._request("GET", self.ENDPOINTS["issue"].format(key=key))
        return Issue.from_json(data)

    def search(self, jql: str) -> List[Issue]:
        """
        Return every issue matching a JQL query, following pagination.

        Raises:
            JiraClientError: If any page cannot be fetched.
        """
        logger.info(f"Searching Jira issues: {jql}")
        issues: List[Issue] = []
        start_at = 0

        while True:
            page = self._request(
                "GET",
                self.ENDPOINTS["search"],
                params={
                    "jql": jql,
                    "startAt": start_at,
                    "maxResults": self._config.page_size,
                    "fields": self.SEARCH_FIELDS,
                },
            )
            batch = page.get("issues", [])
            issues.extend(Issue.from_json(item) for item in batch)
            start_at += len(batch)

            total = page.get("total", start_at)
            if not batch or start_at >= total:
                break

        logger.info(f"Found {len(issues)} issues")
        return issues

    def close(self) -> None:
        """Close the HTTP session."""
        if self._session is not None:
            self._session.close()
            self._session = None
            logger.debug("Jira client session closed")

    def __enter__(self) -> "JiraClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
