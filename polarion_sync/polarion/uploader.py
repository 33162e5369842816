"""
Polarion Uploader Module.

Submits XML documents to the Polarion importers:
- ``testcase``: Test Case Importer (``/import/testcase``).
- ``xunit``: XUnit Importer (``/import/xunit``).

In dump-only mode the document is written to disk instead, which allows
checking the generated XML without touching Polarion.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import requests
from loguru import logger

from polarion_sync.polarion.document import Element

IMPORTER_KINDS = ("testcase", "xunit")


class PolarionUploadError(Exception):
    """Raised when a document cannot be submitted to Polarion."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass
class PolarionConfig:
    """Configuration for the Polarion importer client."""

    base_url: str
    dump_dir: str = "."
    timeout_sec: int = 60
    verify_ssl: bool = True


class PolarionUploader:
    """
    Uploads documents to the Polarion importers.

    Usage::

        uploader = PolarionUploader("https://polarion.example.com/polarion")
        uploader.upload("xunit", document, "user", "secret", dump_only=False)
    """

    ENDPOINT = "/import/{kind}"

    def __init__(
        self,
        base_url: str = "",
        dump_dir: str | Path = ".",
        timeout_sec: int = 60,
        verify_ssl: bool = True,
        config: Optional[PolarionConfig] = None,
    ) -> None:
        """
        Initialize the uploader.

        Args:
            base_url: Polarion base URL (up to and including ``/polarion``).
            dump_dir: Directory dump-only documents are written to.
            timeout_sec: Request timeout in seconds.
            verify_ssl: Whether to verify SSL certificates.
            config: Optional PolarionConfig dataclass (overrides individual params).
        """
        if config:
            self._config = config
        else:
            self._config = PolarionConfig(
                base_url=base_url.rstrip("/"),
                dump_dir=str(dump_dir),
                timeout_sec=timeout_sec,
                verify_ssl=verify_ssl,
            )
        self._session: Optional[requests.Session] = None

    def importer_url(self, kind: str) -> str:
        return f"{self._config.base_url}{self.ENDPOINT.format(kind=kind)}"

    def dump_path(self, kind: str) -> Path:
        return Path(self._config.dump_dir) / f"polarion-{kind}.xml"

    def _get_session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
            self._session.verify = self._config.verify_ssl
        return self._session

    def upload(
        self,
        kind: str,
        document: Element,
        username: str,
        password: str,
        dump_only: bool = False,
    ) -> Optional[Path]:
        """
        Submit a document to the importer selected by ``kind``.

        Args:
            kind: Importer kind, "testcase" or "xunit".
            document: Root element of the document.
            username: Polarion username.
            password: Polarion password.
            dump_only: Write the document to disk instead of submitting it.

        Returns:
            Path of the written file in dump-only mode, None otherwise.

        Raises:
            ValueError: If ``kind`` is unknown.
            PolarionUploadError: If the importer rejects the request or
                cannot be reached.
        """
        if kind not in IMPORTER_KINDS:
            raise ValueError(
                f"Unknown Polarion importer '{kind}'. Valid: {IMPORTER_KINDS}"
            )

        xml = document.to_bytes()

        if dump_only:
            path = self.dump_path(kind)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(xml)
            logger.info(f"Polarion {kind} document dumped to: {path}")
            return path

        self._submit(kind, xml, username, password)
        return None

    def _submit(self, kind: str, xml: bytes, username: str, password: str) -> Any:
        session = self._get_session()
        url = self.importer_url(kind)
        logger.info(f"Uploading {kind} document to {url}")

        try:
            response = session.post(
                url,
                files={"file": (f"{kind}.xml", xml, "application/xml")},
                auth=(username, password),
                timeout=self._config.timeout_sec,
            )
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            logger.error(f"Polarion importer HTTP error: {e} (status={status_code})")
            raise PolarionUploadError(
                f"Polarion {kind} import failed: {e}", status_code=status_code
            ) from e
        except requests.exceptions.ConnectionError as e:
            logger.error(f"Polarion connection error: {e}")
            raise PolarionUploadError(f"Cannot connect to Polarion: {e}") from e
        except requests.exceptions.Timeout as e:
            logger.error(f"Polarion importer timeout: {e}")
            raise PolarionUploadError(
                f"Polarion request timed out after {self._config.timeout_sec}s"
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Polarion request error: {e}")
            raise PolarionUploadError(f"Polarion {kind} import request failed: {e}") from e

        logger.info(f"Polarion {kind} import submitted (status={response.status_code})")
        logger.debug(f"Polarion response: {response.text}")
        return response

    def close(self) -> None:
        """Close the HTTP session."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def __enter__(self) -> "PolarionUploader":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
