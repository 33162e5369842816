"""
Pipeline Module.

The two Polarion upload flows:

- Test cases: local test files -> test-case records -> ``testcases``
  document -> Test Case Importer.
- Test runs: Jira epic -> linked test-run issues -> ``testsuites``
  document -> XUnit Importer.

Credentials and settings are passed in explicitly; nothing here reads the
environment.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from loguru import logger

from polarion_sync.config.loader import Settings
from polarion_sync.jira_client.jira import JiraClient, assert_epic
from polarion_sync.jira_client.test_run import load_test_runs
from polarion_sync.polarion.mapper import (
    build_testcases_document,
    build_xunit_document,
    map_test_cases,
    map_test_runs,
)
from polarion_sync.polarion.uploader import PolarionUploader
from polarion_sync.test_cases.test_case import TestCase, load_test_cases
from polarion_sync.test_cases.test_file import load_test_files
from polarion_sync.utils import flat


def create_uploader(settings: Settings) -> PolarionUploader:
    return PolarionUploader(
        base_url=settings.polarion_url,
        dump_dir=settings.dump_dir,
        timeout_sec=settings.timeout_sec,
        verify_ssl=settings.verify_ssl,
    )


def create_jira_client(settings: Settings, username: str, password: str) -> JiraClient:
    return JiraClient(
        base_url=settings.jira_url,
        username=username,
        password=password,
        timeout_sec=settings.timeout_sec,
        verify_ssl=settings.verify_ssl,
    )


def collect_test_cases(settings: Settings) -> List[TestCase]:
    """Load and flatten the test cases of every local test file."""
    files = load_test_files(settings.tests_dir, settings.repository_url)
    return flat(load_test_cases(f) for f in files)


def upload_test_cases(
    settings: Settings,
    polarion_username: str,
    polarion_password: str,
    dump_only: bool = False,
    uploader: Optional[PolarionUploader] = None,
) -> Optional[Path]:
    """
    Upload all local test-case definitions to Polarion.

    Args:
        settings: Resolved settings.
        polarion_username: Polarion username.
        polarion_password: Polarion password.
        dump_only: Write the document to disk instead of uploading it.
        uploader: Uploader to use (created from ``settings`` if omitted).

    Returns:
        Path of the dumped document in dump-only mode, None otherwise.
    """
    tests = collect_test_cases(settings)
    logger.info(f"uploading {len(tests)} test cases")

    document = build_testcases_document(
        settings.polarion_project_id, map_test_cases(tests)
    )

    with uploader or create_uploader(settings) as sink:
        return sink.upload(
            "testcase", document, polarion_username, polarion_password, dump_only
        )


def upload_test_runs(
    settings: Settings,
    polarion_username: str,
    polarion_password: str,
    jira_username: str,
    jira_password: str,
    epic_key: str,
    template_id: str,
    dump_only: bool = False,
    jira: Optional[JiraClient] = None,
    uploader: Optional[PolarionUploader] = None,
) -> Optional[Path]:
    """
    Report the results of the manual test runs of an epic to Polarion.

    The epic summary becomes the Polarion test-run title. Skipped runs are
    left out of the document.

    Args:
        settings: Resolved settings.
        polarion_username: Polarion username.
        polarion_password: Polarion password.
        jira_username: Jira username.
        jira_password: Jira password.
        epic_key: Key of the epic containing the test-run issues.
        template_id: Polarion test-run template id.
        dump_only: Write the document to disk instead of uploading it.
        jira: Jira client to use (created from ``settings`` if omitted).
        uploader: Uploader to use (created from ``settings`` if omitted).

    Returns:
        Path of the dumped document in dump-only mode, None otherwise.

    Raises:
        NotAnEpicError: If ``epic_key`` is not an epic. Raised before any upload.
        JiraClientError: If a Jira request fails.
        TestRunError: If a linked issue cannot be mapped to a test run.
    """
    with jira or create_jira_client(settings, jira_username, jira_password) as client:
        epic = client.find_issue(epic_key)
        assert_epic(epic)

        runs = load_test_runs(client, f'"Epic Link" = {epic.key}')

    testcases = map_test_runs(runs)
    logger.info(f"uploading {len(testcases)} tests")

    document = build_xunit_document(
        settings.polarion_project_id, epic.summary, template_id, testcases
    )

    with uploader or create_uploader(settings) as sink:
        return sink.upload(
            "xunit", document, polarion_username, polarion_password, dump_only
        )
