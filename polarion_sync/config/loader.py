"""
Configuration Loader Module.

Loads the optional polarion-sync settings file:
- YAML or JSON files.
- Schema validation using JSON Schema.
- Merging of default values with the file's overrides into ``Settings``.

Example settings file::

    polarion:
      url: https://polarion.example.com/polarion
      project_id: MYPROJECT
    jira:
      url: https://issues.example.com
    test_cases:
      tests_dir: tests
      repository_url: https://github.com/example/test-cases/blob/master/tests
    dump_dir: out
    timeout_sec: 120
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import jsonschema
import yaml
from loguru import logger

SETTINGS_SCHEMA_PATH = Path(__file__).parent / "schemas" / "settings_schema.json"


class ConfigurationError(Exception):
    """Raised when a configuration file is invalid or cannot be loaded."""

    def __init__(self, message: str, errors: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.errors = errors or []


@dataclass(frozen=True)
class Settings:
    """Resolved settings for one invocation."""

    polarion_url: str = "https://polarion.engineering.redhat.com/polarion"
    polarion_project_id: str = "RedHatManagedIntegration"
    jira_url: str = "https://issues.redhat.com"
    tests_dir: str = "tests"
    repository_url: str = ""
    dump_dir: str = "."
    timeout_sec: int = 60
    verify_ssl: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        """Build settings from a validated settings mapping, keeping defaults."""
        polarion = data.get("polarion", {})
        jira = data.get("jira", {})
        test_cases = data.get("test_cases", {})

        overrides = {
            "polarion_url": polarion.get("url"),
            "polarion_project_id": polarion.get("project_id"),
            "jira_url": jira.get("url"),
            "tests_dir": test_cases.get("tests_dir"),
            "repository_url": test_cases.get("repository_url"),
            "dump_dir": data.get("dump_dir"),
            "timeout_sec": data.get("timeout_sec"),
            "verify_ssl": data.get("verify_ssl"),
        }
        return cls(**{k: v for k, v in overrides.items() if v is not None})


class ConfigLoader:
    """
    Settings file loader with schema validation.

    Attributes:
        validator: Draft 7 validator for the bundled settings schema.
    """

    SUPPORTED_EXTENSIONS = {".yaml", ".yml", ".json"}

    def __init__(self) -> None:
        schema = json.loads(SETTINGS_SCHEMA_PATH.read_text(encoding="utf-8"))
        self.validator = jsonschema.Draft7Validator(schema)

    def load(self, path: str | Path) -> Dict[str, Any]:
        """
        Load and validate a settings file.

        Args:
            path: Path of the settings file.

        Returns:
            Parsed settings as a dictionary.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigurationError: If the file cannot be read, parsed or validated.
        """
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        logger.info(f"Loading configuration: {file_path}")
        data = self._read_file(file_path)
        self._validate(data, file_path)
        return data

    def load_settings(self, path: str | Path | None = None) -> Settings:
        """
        Load ``Settings`` from a settings file, or defaults when ``path`` is empty.

        Raises:
            FileNotFoundError: If ``path`` is given but does not exist.
            ConfigurationError: If the file is invalid.
        """
        if not path:
            logger.debug("No settings file given, using defaults")
            return Settings()
        return Settings.from_dict(self.load(path))

    def _read_file(self, file_path: Path) -> Dict[str, Any]:
        """Read and parse a YAML or JSON file."""
        suffix = file_path.suffix.lower()
        if suffix not in self.SUPPORTED_EXTENSIONS:
            raise ConfigurationError(
                f"Unsupported file format '{suffix}'. "
                f"Supported: {self.SUPPORTED_EXTENSIONS}"
            )

        try:
            content = file_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Failed to read file {file_path}: {e}") from e

        try:
            if suffix in {".yaml", ".yml"}:
                data = yaml.safe_load(content)
            else:
                data = json.loads(content)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Failed to parse {file_path}: {e}") from e

        # An empty YAML file means "no overrides".
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration file must contain a mapping (dict), "
                f"got {type(data).__name__}: {file_path}"
            )

        return data

    def _validate(self, data: Dict[str, Any], file_path: Path) -> None:
        """Validate settings against the schema, reporting every error."""
        errors = sorted(
            self.validator.iter_errors(data),
            key=lambda e: [str(p) for p in e.absolute_path],
        )
        if not errors:
            logger.debug(f"Configuration validated: {file_path}")
            return

        messages: List[str] = []
        for error in errors:
            location = " -> ".join(str(p) for p in error.absolute_path) or "(root)"
            messages.append(f"  [{location}] {error.message}")
        raise ConfigurationError(
            f"Configuration validation failed for {file_path} "
            f"({len(messages)} error(s)):\n" + "\n".join(messages),
            errors=messages,
        )
