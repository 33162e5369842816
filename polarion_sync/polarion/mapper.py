"""
Polarion Mapper Module.

Maps test-case definitions and test-run results to the XML documents
expected by the Polarion importers:

- Test Case Importer: a ``testcases`` document, one ``testcase`` per
  definition, tagged with a fixed set of custom fields.
- XUnit Importer: a JUnit-style ``testsuites``/``testsuite`` document, one
  ``testcase`` per executed run, referencing the Polarion test case through
  the ``polarion-testcase-id`` property.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from polarion_sync.jira_client.test_run import TestRun, TestRunResult
from polarion_sync.polarion.document import Element, element, properties
from polarion_sync.test_cases.test_case import TestCase

LOOKUP_METHOD = "custom"

# Same values for every test case.
CUSTOM_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("caselevel", "component"),
    ("casecomponent", "-"),
    ("testtype", "functional"),
    ("subtype1", "-"),
    ("subtype2", "-"),
    ("caseposneg", "positive"),
    ("caseimportance", "high"),
    ("caseautomation", "automated"),
)

# TODO: confirm with the Polarion admins whether the importer needs the real
# testcase count here.
TESTSUITE_TESTS = 1


# ---------------------------------------------------------------------------
# Test Case Importer
# ---------------------------------------------------------------------------


def custom_fields() -> Element:
    """Build the ``custom-fields`` block shared by all test cases."""
    return element(
        "custom-fields",
        None,
        *(
            element("custom-field", {"content": content, "id": field_id})
            for field_id, content in CUSTOM_FIELDS
        ),
    )


def map_test_case(test: TestCase) -> Element:
    """Map a test-case definition to a ``testcase`` element."""
    return element(
        "testcase",
        {"id": test.id},
        element("title", text=f"{test.id} - {test.category} - {test.title}"),
        element("description", text=test.file.link),
        custom_fields(),
    )


def map_test_cases(tests: Iterable[TestCase]) -> List[Element]:
    return [map_test_case(t) for t in tests]


def build_testcases_document(project_id: str, testcases: Sequence[Element]) -> Element:
    """
    Wrap ``testcase`` elements in a Test Case Importer document.

    Args:
        project_id: Polarion project id.
        testcases: Elements produced by ``map_test_case``.

    Returns:
        The ``testcases`` root element.
    """
    return element(
        "testcases",
        {"project-id": project_id},
        properties(("lookup-method", LOOKUP_METHOD)),
        *testcases,
    )


# ---------------------------------------------------------------------------
# XUnit Importer
# ---------------------------------------------------------------------------


def map_test_run(run: TestRun) -> Element:
    """
    Map an executed test run to a JUnit ``testcase`` element.

    Failed runs get a ``failure`` child and blocked runs an ``error`` child,
    both with the run link as message. Passed runs get no outcome child.

    Raises:
        ValueError: If the run was skipped.
    """
    children = [properties(("polarion-testcase-id", run.id))]

    if run.result is TestRunResult.FAILED:
        children.append(element("failure", {"message": run.link}))
    elif run.result is TestRunResult.BLOCKED:
        children.append(element("error", {"message": run.link}))
    elif run.result is not TestRunResult.PASSED:
        raise ValueError(f"Test run {run.id} was not executed: {run.result.value}")

    return element("testcase", {"name": run.title}, *children)


def map_test_runs(runs: Iterable[TestRun]) -> List[Element]:
    """
    Map test runs to ``testcase`` elements, leaving skipped runs out.

    Args:
        runs: Test runs in any result state.

    Returns:
        One element per non-skipped run, in input order.
    """
    return [map_test_run(r) for r in runs if r.result is not TestRunResult.SKIPPED]


def build_xunit_document(
    project_id: str,
    title: str,
    template_id: str,
    testcases: Sequence[Element],
) -> Element:
    """
    Wrap ``testcase`` elements in an XUnit Importer document.

    Args:
        project_id: Polarion project id.
        title: Title of the Polarion test run.
        template_id: Polarion test-run template id.
        testcases: Elements produced by ``map_test_run``.

    Returns:
        The ``testsuites`` root element.
    """
    return element(
        "testsuites",
        None,
        properties(
            ("polarion-project-id", project_id),
            ("polarion-testrun-title", title),
            ("polarion-testrun-template-id", template_id),
            ("polarion-lookup-method", LOOKUP_METHOD),
        ),
        element("testsuite", {"tests": TESTSUITE_TESTS}, *testcases),
    )
