"""
Test Cases Module.

Loads test-case definitions from local Markdown files:
- Discovering test files below a tests directory.
- Parsing front matter and test-case headings into records.
"""

from polarion_sync.test_cases.test_file import TestFile, load_test_files
from polarion_sync.test_cases.test_case import TestCase, TestCaseParseError, load_test_cases

__all__ = [
    "TestFile",
    "load_test_files",
    "TestCase",
    "TestCaseParseError",
    "load_test_cases",
]
