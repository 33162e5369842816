"""
Jira Client Module.

Provides integration with the Jira REST API for:
- Fetching epics and asserting their issue type.
- Querying the issues linked to an epic.
- Mapping those issues to manual test-run results.
"""

from polarion_sync.jira_client.jira import (
    Issue,
    JiraClient,
    JiraClientError,
    JiraConfig,
    NotAnEpicError,
    assert_epic,
)
from polarion_sync.jira_client.test_run import (
    TestRun,
    TestRunError,
    TestRunResult,
    load_test_runs,
)

__all__ = [
    "Issue",
    "JiraClient",
    "JiraClientError",
    "JiraConfig",
    "NotAnEpicError",
    "assert_epic",
    "TestRun",
    "TestRunError",
    "TestRunResult",
    "load_test_runs",
]
