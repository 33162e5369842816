"""
Configuration Management Module.

Handles loading and validation of the optional settings file
(Polarion and Jira endpoints, test-case location, dump directory).
"""

from polarion_sync.config.loader import ConfigLoader, ConfigurationError, Settings

__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "Settings",
]
