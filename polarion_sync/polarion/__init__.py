"""
Polarion Module.

Builds and submits Polarion importer documents:
- Typed XML node model and builder.
- Mapping of test cases and test runs to importer documents.
- Upload to the Test Case and XUnit importers (or dump to disk).
"""

from polarion_sync.polarion.document import Element, Text, element
from polarion_sync.polarion.mapper import (
    build_testcases_document,
    build_xunit_document,
    map_test_case,
    map_test_cases,
    map_test_run,
    map_test_runs,
)
from polarion_sync.polarion.uploader import (
    PolarionConfig,
    PolarionUploader,
    PolarionUploadError,
)

__all__ = [
    "Element",
    "Text",
    "element",
    "build_testcases_document",
    "build_xunit_document",
    "map_test_case",
    "map_test_cases",
    "map_test_run",
    "map_test_runs",
    "PolarionConfig",
    "PolarionUploader",
    "PolarionUploadError",
]
