"""HTTP client for the release index.

This module centralises HTTP access for the installer. It wraps a
:class:`requests.Session`, resolves symbolic tags such as ``latest`` into
concrete release tags, and streams release files to disk. Only a ``200``
response counts as success; anything else is logged at debug level and
raised as :class:`DownloadError`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import requests
from pydantic import ValidationError
from requests import Response, Session

from chezinstall.domain.errors import DownloadError, ReleaseResolutionError
from chezinstall.domain.models import DEFAULT_BASE_URL, DEFAULT_REPO, LATEST_TAG
from chezinstall.infrastructure.observability import get_logger

from .dto import ReleaseMetadata

logger = get_logger(__name__)

CHUNK_SIZE = 64 * 1024


class ReleaseHttpClient:
    """HTTP helper for resolving tags and downloading release files."""

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        repo: str = DEFAULT_REPO,
        timeout_seconds: float = 60.0,
        session: Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.repo = repo.strip("/")
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    # -------------------- request helpers --------------------
    def _prepare_headers(self, accept: str | None) -> dict[str, str]:
        from chezinstall import __version__

        headers = {"User-Agent": f"chezinstall/{__version__}"}
        if accept:
            headers["Accept"] = accept
        return headers

    def _request(self, url: str, accept: str | None, **kwargs: Any) -> Response:
        try:
            response = self.session.get(
                url,
                headers=self._prepare_headers(accept),
                timeout=self.timeout_seconds,
                allow_redirects=True,
                **kwargs,
            )
        except requests.RequestException as exc:
            logger.debug(f"http_download request to {url} failed: {exc}")
            raise DownloadError(f"request to {url} failed: {exc}") from exc
        if response.status_code != 200:
            logger.debug(
                f"http_download received HTTP status {response.status_code}")
            response.close()
            raise DownloadError(
                f"{url} returned HTTP status {response.status_code}")
        return response

    def http_download(
        self, local_file: Path | str, url: str, accept: str | None = None
    ) -> Path:
        """Stream ``url`` into ``local_file`` and return its path."""
        logger.debug(f"http_download {url}")
        path = Path(local_file)
        response = self._request(url, accept, stream=True)
        try:
            with open(path, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
        except requests.RequestException as exc:
            raise DownloadError(f"download of {url} failed: {exc}") from exc
        finally:
            response.close()
        return path

    def http_get(self, url: str, accept: str | None = None) -> str:
        """GET ``url`` and return the decoded body."""
        logger.debug(f"http_download {url}")
        response = self._request(url, accept)
        response.encoding = response.encoding or "utf-8"
        return response.text

    # -------------------- release index --------------------
    def release_url(self, tag: str) -> str:
        return f"{self.base_url}/{self.repo}/releases/{tag}"

    def fetch_release(self, tag: str = LATEST_TAG) -> ReleaseMetadata:
        """Fetch and validate the release metadata for ``tag``.

        Raises:
            ReleaseResolutionError: If the body is empty, is not JSON, or
                carries no ``tag_name``.
        """
        try:
            body = self.http_get(self.release_url(tag), "application/json")
        except DownloadError as exc:
            logger.error(f"real_tag error retrieving GitHub release {tag}")
            raise ReleaseResolutionError(
                f"error retrieving GitHub release {tag}") from exc

        if not body.strip():
            logger.error(f"real_tag error retrieving GitHub release {tag}")
            raise ReleaseResolutionError(
                f"empty response for GitHub release {tag}")

        try:
            return ReleaseMetadata.model_validate(json.loads(body))
        except (json.JSONDecodeError, ValidationError, TypeError) as exc:
            logger.error(
                f"real_tag error determining real tag of GitHub release {tag}")
            raise ReleaseResolutionError(
                f"error determining real tag of GitHub release {tag}"
            ) from exc

    def resolve_tag(self, tag: str = LATEST_TAG) -> str:
        """Resolve ``tag`` (possibly ``latest``) to a concrete release tag."""
        logger.debug(f"checking GitHub for tag {tag}")
        real_tag = self.fetch_release(tag).tag_name
        logger.debug(f"found tag {real_tag} for {tag}")
        return real_tag


__all__ = ["ReleaseHttpClient"]
