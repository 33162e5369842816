"""
Polarion Sync - Test Suite Package.

Contains Pytest-based unit tests organized by component:
- Document builder, mappers and uploader.
- Jira client and test-run loading.
- Test-case file discovery and parsing.
- Configuration, pipelines and command line.
"""
