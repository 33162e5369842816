"""
Unit Tests for the Test Cases Module.

Covers:
- load_test_files: discovery, exclusions, links.
- load_test_cases: headings, categories, front matter.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from polarion_sync.test_cases.test_case import (
    TestCase,
    TestCaseParseError,
    category_from_path,
    load_test_cases,
    split_front_matter,
)
from polarion_sync.test_cases.test_file import TestFile, build_link, load_test_files
from polarion_sync.utils import flat


def _file(content: str, relative_path: str = "alerts/a01.md") -> TestFile:
    return TestFile(
        path=Path("/tmp") / relative_path,
        relative_path=relative_path,
        content=content,
        link=f"https://example.com/{relative_path}",
    )


# ---------------------------------------------------------------------------
# load_test_files Tests
# ---------------------------------------------------------------------------


class TestLoadTestFiles:
    """Tests for test file discovery."""

    def test_finds_markdown_files(self, tests_dir: Path) -> None:
        """Test that only Markdown files other than README.md are loaded."""
        files = load_test_files(tests_dir)
        assert [f.relative_path for f in files] == [
            "alerts/a01-verify-alerts.md",
            "alerts/a02-alert-routing.md",
            "backup/b01-backup.md",
        ]

    def test_links_use_repository_url(self, tests_dir: Path) -> None:
        """Test that links are built from the repository URL."""
        files = load_test_files(tests_dir, "https://github.com/x/y/blob/master/tests/")
        assert files[0].link == (
            "https://github.com/x/y/blob/master/tests/alerts/a01-verify-alerts.md"
        )

    def test_repository_url_no_warning(
        self, tests_dir: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that a configured repository URL logs no warning."""
        load_test_files(tests_dir, "https://github.com/x/y/blob/master/tests")
        assert "No repository URL" not in caplog.text

    def test_links_default_to_relative_path(
        self, tests_dir: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that links fall back to the relative path with a warning."""
        files = load_test_files(tests_dir)
        assert files[2].link == "backup/b01-backup.md"
        assert "No repository URL configured" in caplog.text

    def test_content_loaded(self, tests_dir: Path) -> None:
        """Test that file content is read."""
        files = load_test_files(tests_dir)
        assert files[0].content.startswith("# A01")
        assert files[0].path.is_absolute()

    def test_missing_directory(self, tmp_path: Path) -> None:
        """Test that a missing tests directory raises."""
        with pytest.raises(FileNotFoundError):
            load_test_files(tmp_path / "nope")

    def test_build_link(self) -> None:
        """Test link joining."""
        assert build_link("https://x/", "a/b.md") == "https://x/a/b.md"
        assert build_link("", "a/b.md") == "a/b.md"


# ---------------------------------------------------------------------------
# load_test_cases Tests
# ---------------------------------------------------------------------------


class TestLoadTestCases:
    """Tests for test case parsing."""

    def test_single_heading(self) -> None:
        """Test parsing a file with one test case."""
        test_file = _file("# A01 - Verify alerts\n\nSome text\n")
        cases = load_test_cases(test_file)

        assert cases == [
            TestCase(id="A01", category="alerts", title="Verify alerts", file=test_file)
        ]

    def test_multiple_headings(self) -> None:
        """Test that every matching heading becomes a test case."""
        cases = load_test_cases(_file("# B01 - Backup\n\n# B01a - Restore  \n"))
        assert [(c.id, c.title) for c in cases] == [("B01", "Backup"), ("B01a", "Restore")]

    def test_other_headings_ignored(self) -> None:
        """Test that headings without a test id are ignored."""
        content = "# Notes\n## A03 - Sub heading\n#A04 - no space\n# a05 - lower\n"
        assert load_test_cases(_file(content)) == []

    def test_front_matter_category(self) -> None:
        """Test that the front matter category wins over the directory."""
        content = "---\ncategory: monitoring\n---\n# A02 - Routing\n"
        cases = load_test_cases(_file(content))
        assert cases[0].category == "monitoring"
        assert cases[0].title == "Routing"

    def test_front_matter_without_category(self) -> None:
        """Test that the directory is used when front matter has no category."""
        content = "---\nproducts: [rhmi]\n---\n# A02 - Routing\n"
        assert load_test_cases(_file(content))[0].category == "alerts"

    def test_invalid_front_matter(self) -> None:
        """Test that broken YAML front matter raises."""
        with pytest.raises(TestCaseParseError):
            load_test_cases(_file("---\ncategory: [unclosed\n---\n# A01 - x\n"))

    def test_front_matter_must_be_mapping(self) -> None:
        """Test that non-mapping front matter raises."""
        with pytest.raises(TestCaseParseError):
            split_front_matter("---\n- a\n- b\n---\nbody")

    def test_no_front_matter(self) -> None:
        """Test content without front matter is returned unchanged."""
        assert split_front_matter("# A01 - x\n") == ({}, "# A01 - x\n")

    def test_category_from_path(self) -> None:
        """Test category derivation from the parent directory."""
        assert category_from_path("alerts/a01.md") == "alerts"
        assert category_from_path("a/b/c.md") == "b"
        assert category_from_path("a01.md") == "-"

    def test_sample_tree(self, tests_dir: Path) -> None:
        """Test loading every test case of the sample tree."""
        cases = flat(load_test_cases(f) for f in load_test_files(tests_dir))
        assert [(c.id, c.category) for c in cases] == [
            ("A01", "alerts"),
            ("A02", "monitoring"),
            ("B01", "backup"),
            ("B01a", "backup"),
        ]
