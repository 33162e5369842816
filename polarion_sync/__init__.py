"""
Polarion Sync - Core Source Package.

This package contains the core logic for:
- Test Cases: Discovery and parsing of local Markdown test-case files.
- Jira Client: Epic lookup and test-run collection from Jira.
- Polarion: Typed XML document building, record mapping and importer upload.
- Configuration: Settings file loading and validation.
"""

__version__ = "0.1.0"
