"""
Command-line entry point.

Usage:
    polarion-sync polarion testcase --dump-only
    polarion-sync polarion testrun --epic INTLY-1234 --template manual-tests
    polarion-sync --config polarion-sync.yaml -v polarion testrun ...

Credentials default to the POLARION_USERNAME, POLARION_PASSWORD,
JIRA_USERNAME and JIRA_PASSWORD environment variables.
"""

from __future__ import annotations

import argparse
import os
import sys
from typing import Callable, Dict, List, Mapping, Optional

from loguru import logger

from polarion_sync import __version__
from polarion_sync.config.loader import ConfigLoader, ConfigurationError
from polarion_sync.jira_client.jira import JiraClientError
from polarion_sync.jira_client.test_run import TestRunError
from polarion_sync.pipeline import upload_test_cases, upload_test_runs
from polarion_sync.polarion.uploader import PolarionUploadError
from polarion_sync.test_cases.test_case import TestCaseParseError

CONFIG_ENV = "POLARION_SYNC_CONFIG"

FATAL_ERRORS = (
    AssertionError,
    ConfigurationError,
    FileNotFoundError,
    JiraClientError,
    PolarionUploadError,
    TestCaseParseError,
    TestRunError,
)


def _add_credential(
    parser: argparse.ArgumentParser,
    flag: str,
    env_var: str,
    help_text: str,
    environ: Mapping[str, str],
) -> None:
    """Add an option that falls back to an environment variable."""
    default = environ.get(env_var) or None
    parser.add_argument(
        flag,
        default=default,
        required=default is None,
        help=f"{help_text} or set {env_var}",
    )


def _add_dump_only(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--dump-only",
        action="store_true",
        help="Write the Polarion document to disk instead of uploading it",
    )


def build_parser(environ: Optional[Mapping[str, str]] = None) -> argparse.ArgumentParser:
    """
    Build the argument parser.

    Args:
        environ: Environment used for option defaults (``os.environ`` if None).
    """
    environ = os.environ if environ is None else environ

    parser = argparse.ArgumentParser(
        prog="polarion-sync",
        description="Upload test cases and test runs to Polarion",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        default=environ.get(CONFIG_ENV),
        help=f"Path to a YAML/JSON settings file or set {CONFIG_ENV}",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug output",
    )

    commands = parser.add_subparsers(dest="command", required=True)
    polarion = commands.add_parser(
        "polarion", help="upload test cases and test runs to Polarion"
    )
    actions = polarion.add_subparsers(dest="action", required=True)

    testcase = actions.add_parser("testcase", help="Upload all test cases to Polarion")
    _add_credential(testcase, "--polarion-username", "POLARION_USERNAME", "Polarion username", environ)
    _add_credential(testcase, "--polarion-password", "POLARION_PASSWORD", "Polarion password", environ)
    _add_dump_only(testcase)

    testrun = actions.add_parser(
        "testrun", help="Report the result of all manual tests to Polarion"
    )
    _add_credential(testrun, "--polarion-username", "POLARION_USERNAME", "Polarion username", environ)
    _add_credential(testrun, "--polarion-password", "POLARION_PASSWORD", "Polarion password", environ)
    _add_credential(testrun, "--jira-username", "JIRA_USERNAME", "Jira username", environ)
    _add_credential(testrun, "--jira-password", "JIRA_PASSWORD", "Jira password", environ)
    testrun.add_argument(
        "--epic",
        required=True,
        help="the key of the epic containing all manual tests",
    )
    testrun.add_argument(
        "--template",
        required=True,
        help="the Polarion template id for the test run",
    )
    _add_dump_only(testrun)

    return parser


def configure_logging(verbose: bool = False) -> None:
    """Send log output to stderr, at DEBUG level when verbose."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")


def _run_testcase(args: argparse.Namespace, loader: ConfigLoader) -> None:
    upload_test_cases(
        loader.load_settings(args.config),
        args.polarion_username,
        args.polarion_password,
        dump_only=args.dump_only,
    )


def _run_testrun(args: argparse.Namespace, loader: ConfigLoader) -> None:
    upload_test_runs(
        loader.load_settings(args.config),
        args.polarion_username,
        args.polarion_password,
        args.jira_username,
        args.jira_password,
        epic_key=args.epic,
        template_id=args.template,
        dump_only=args.dump_only,
    )


HANDLERS: Dict[str, Callable[[argparse.Namespace, ConfigLoader], None]] = {
    "testcase": _run_testcase,
    "testrun": _run_testrun,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point; returns the process exit code."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        HANDLERS[args.action](args, ConfigLoader())
    except FATAL_ERRORS as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    logger.info("Done")
    return 0


if __name__ == "__main__":
    sys.exit(main())
