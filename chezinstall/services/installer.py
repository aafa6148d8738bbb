"""Release installation service.

The :class:`InstallService` runs the install as a straight line of steps,
each of which raises on failure:

1. resolve the requested tag to a concrete release tag
2. derive the platform-specific archive and checksums names
3. download both into a scoped temporary directory
4. verify the archive's SHA-256 against the checksums file
5. extract the archive and copy the binary into the install directory

The temporary directory is removed on return, on error, and on SIGINT or
SIGTERM.
"""

from __future__ import annotations

import os
import shutil
import signal
import stat
import subprocess
import tempfile
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, Sequence

from chezinstall.app.config import InstallerConfig
from chezinstall.domain.errors import (
    DownloadError,
    ExtractionError,
    InstallerError,
    MissingToolError,
)
from chezinstall.domain.models import LATEST_TAG, Platform, ReleaseAsset
from chezinstall.infrastructure.archives import untar
from chezinstall.infrastructure.checksums import hash_sha256_verify
from chezinstall.infrastructure.http import ReleaseHttpClient
from chezinstall.infrastructure.observability import get_logger, log_context
from chezinstall.infrastructure.platform import detect_platform

PlatformDetector = Callable[[], Platform]

_TERMINATING_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def _exit_on_signal(signum: int, _frame: object) -> None:
    raise SystemExit(128 + signum)


@contextmanager
def scoped_tempdir(prefix: str = "chezinstall-") -> Iterator[Path]:
    """Yield a temporary directory removed on exit, error or termination signal.

    While the directory exists, SIGINT and SIGTERM raise :class:`SystemExit`
    so that the cleanup runs; the previous handlers are restored afterwards.
    Handlers can only be installed from the main thread, elsewhere the
    directory is still cleaned up on normal and exceptional exit.
    """
    previous: dict[int, object] = {}
    if threading.current_thread() is threading.main_thread():
        for signum in _TERMINATING_SIGNALS:
            previous[signum] = signal.signal(signum, _exit_on_signal)
    try:
        with tempfile.TemporaryDirectory(prefix=prefix) as tmpdir:
            yield Path(tmpdir)
    finally:
        for signum, handler in previous.items():
            signal.signal(signum, handler)


@dataclass(frozen=True)
class InstallPlan:
    """What an install of a given tag would fetch and where it would go."""

    requested_tag: str
    asset: ReleaseAsset
    target: Path


class InstallService:
    """Resolve, download, verify, extract and install a release binary."""

    def __init__(
        self,
        config: InstallerConfig,
        *,
        client: ReleaseHttpClient | None = None,
        platform_detector: PlatformDetector = detect_platform,
    ) -> None:
        self.config = config
        self.client = client or ReleaseHttpClient(
            base_url=config.base_url,
            repo=config.repo,
            timeout_seconds=config.timeout_seconds,
        )
        self._platform_detector = platform_detector
        self._logger = get_logger(self.__class__.__module__)

    # -------------------- planning --------------------
    def plan(self, tag: str | None = None) -> InstallPlan:
        """Resolve ``tag`` and work out the release asset for this host."""
        requested = tag or self.config.tag or LATEST_TAG
        platform = self._platform_detector()
        real_tag = self.client.resolve_tag(requested)
        asset = ReleaseAsset(
            tag=real_tag,
            platform=platform,
            project=self.config.project,
            repo=self.config.repo,
            base_url=self.config.base_url,
        )
        self._logger.info(
            f"found version {asset.version} for {requested}/{platform.goos}/{platform.goarch}"
        )
        return InstallPlan(
            requested_tag=requested,
            asset=asset,
            target=self.config.bindir / asset.binary_name,
        )

    # -------------------- steps --------------------
    def download(self, asset: ReleaseAsset, tmpdir: Path) -> tuple[Path, Path]:
        """Download the archive and checksums file into ``tmpdir``."""
        paths = []
        for name, url in (
            (asset.archive_name, asset.archive_url),
            (asset.checksums_name, asset.checksums_url),
        ):
            try:
                paths.append(self.client.http_download(tmpdir / name, url))
            except DownloadError:
                self._logger.error(f"unable to download {url}")
                raise
        archive, checksums = paths
        return archive, checksums

    def find_binary(self, root: Path, binary_name: str) -> Path:
        """Locate ``binary_name`` in an extracted archive tree."""
        direct = root / binary_name
        if direct.is_file():
            return direct
        for candidate in sorted(root.rglob(binary_name)):
            if candidate.is_file():
                return candidate
        self._logger.error(f"unable to find {binary_name} in archive")
        raise ExtractionError(f"unable to find {binary_name} in archive")

    def install_binary(self, source: Path, bindir: Path) -> Path:
        """Copy ``source`` into ``bindir`` with mode 0755."""
        target = bindir / source.name
        try:
            bindir.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, target)
            target.chmod(
                stat.S_IRWXU | stat.S_IRGRP | stat.S_IXGRP | stat.S_IROTH | stat.S_IXOTH
            )
        except OSError as exc:
            self._logger.error(f"unable to install {target}: {exc}")
            raise InstallerError(f"unable to install {target}: {exc}") from exc
        self._logger.info(f"installed {target}")
        return target

    # -------------------- workflow --------------------
    def install(self, tag: str | None = None) -> Path:
        """Run the full install and return the installed binary's path."""
        with scoped_tempdir() as tmpdir:
            plan = self.plan(tag)
            asset = plan.asset
            with log_context(tag=asset.tag, platform=asset.platform.label):
                archive, checksums = self.download(asset, tmpdir)
                hash_sha256_verify(archive, checksums)
                extract_dir = tmpdir / "extract"
                untar(archive, extract_dir)
                binary = self.find_binary(extract_dir, asset.binary_name)
                return self.install_binary(binary, self.config.bindir)

    def run_binary(self, binary: Path, args: Sequence[str]) -> int:
        """Run the installed binary with ``args`` and return its exit status."""
        self._logger.debug(f"running {binary} {' '.join(args)}".rstrip())
        try:
            completed = subprocess.run([os.fspath(binary), *args], check=False)
        except OSError as exc:
            self._logger.critical(f"unable to run {binary}: {exc}")
            raise MissingToolError(f"unable to run {binary}: {exc}") from exc
        return completed.returncode


__all__ = ["InstallPlan", "InstallService", "scoped_tempdir"]
