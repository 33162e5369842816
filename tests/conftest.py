"""
Root conftest.py — Shared Pytest fixtures.

Provides fixtures for:
- Capturing loguru output through Pytest's caplog.
- A sample tree of Markdown test-case files.
- Jira and Polarion clients whose HTTP sessions are mocked.
- Settings pointing at temporary directories.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List
from unittest.mock import MagicMock

import pytest
from loguru import logger

from polarion_sync.config.loader import Settings
from polarion_sync.jira_client.jira import JiraClient
from polarion_sync.polarion.uploader import PolarionUploader


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


@pytest.fixture
def caplog(caplog: pytest.LogCaptureFixture):
    """Route loguru records to Pytest's caplog handler."""
    handler_id = logger.add(caplog.handler, format="{message}", level=0)
    yield caplog
    logger.remove(handler_id)


# ---------------------------------------------------------------------------
# Test-case files
# ---------------------------------------------------------------------------


ALERTS_A01 = """\
# A01 - Verify that all alerts are firing correctly

## Steps

1. Open the console
"""

ALERTS_A02 = """\
---
category: monitoring
products:
  - name: rhmi
---

# A02 - Check alert routing

## Description

Not a test case heading:

# Notes
"""

BACKUP_B01 = """\
# B01 - Backup the databases

# B01a - Restore the databases
"""


@pytest.fixture
def tests_dir(tmp_path: Path) -> Path:
    """Create a directory of Markdown test-case files."""
    root = tmp_path / "tests"
    (root / "alerts").mkdir(parents=True)
    (root / "backup").mkdir()
    (root / "alerts" / "a01-verify-alerts.md").write_text(ALERTS_A01, encoding="utf-8")
    (root / "alerts" / "a02-alert-routing.md").write_text(ALERTS_A02, encoding="utf-8")
    (root / "backup" / "b01-backup.md").write_text(BACKUP_B01, encoding="utf-8")
    (root / "README.md").write_text("# X01 - Not a test\n", encoding="utf-8")
    (root / "notes.txt").write_text("# X02 - Not markdown\n", encoding="utf-8")
    return root


@pytest.fixture
def settings(tmp_path: Path, tests_dir: Path) -> Settings:
    """Settings pointing at the sample tests and a temporary dump directory."""
    return Settings(
        polarion_url="https://polarion.example.com/polarion",
        polarion_project_id="TESTPROJECT",
        jira_url="https://jira.example.com",
        tests_dir=str(tests_dir),
        repository_url="https://github.com/example/test-cases/blob/master/tests",
        dump_dir=str(tmp_path / "dump"),
    )


# ---------------------------------------------------------------------------
# Jira
# ---------------------------------------------------------------------------


def make_issue(
    key: str,
    summary: str,
    status: str = "Passed",
    issue_type: str = "Task",
) -> Dict[str, Any]:
    """Build a Jira REST API issue object."""
    return {
        "key": key,
        "fields": {
            "summary": summary,
            "status": {"name": status},
            "issuetype": {"name": issue_type},
        },
    }


def make_response(payload: Any = None, status_code: int = 200) -> MagicMock:
    """Build a mocked requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    response.text = "" if payload is None else str(payload)
    return response


@pytest.fixture
def jira_session() -> MagicMock:
    """Mocked requests.Session for the Jira client."""
    return MagicMock()


@pytest.fixture
def jira_client(jira_session: MagicMock) -> JiraClient:
    """Jira client sending its requests to ``jira_session``."""
    client = JiraClient(
        base_url="https://jira.example.com/",
        username="jira-user",
        password="jira-pass",
    )
    client._session = jira_session
    return client


def queue_jira_responses(session: MagicMock, payloads: List[Any]) -> None:
    """Make ``session.request`` return ``payloads`` in order."""
    session.request.side_effect = [make_response(p) for p in payloads]


# ---------------------------------------------------------------------------
# Polarion
# ---------------------------------------------------------------------------


@pytest.fixture
def polarion_session() -> MagicMock:
    """Mocked requests.Session for the Polarion uploader."""
    session = MagicMock()
    session.post.return_value = make_response({"jobIds": [1]})
    return session


@pytest.fixture
def uploader(settings: Settings, polarion_session: MagicMock) -> PolarionUploader:
    """Uploader posting to ``polarion_session``."""
    sink = PolarionUploader(base_url=settings.polarion_url, dump_dir=settings.dump_dir)
    sink._session = polarion_session
    return sink


def posted_xml(session: MagicMock, call: int = 0) -> bytes:
    """Return the XML body of a mocked upload."""
    _, kwargs = session.post.call_args_list[call]
    _, xml, _ = kwargs["files"]["file"]
    return xml


@pytest.fixture
def no_network(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    """Fail the test if any real requests.Session sends a request."""
    guard = MagicMock(side_effect=AssertionError("unexpected network call"))
    monkeypatch.setattr("requests.Session.request", guard)
    return guard
