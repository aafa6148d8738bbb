"""Release domain models: target platforms and the assets built for them."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_PROJECT = "chezmoi"
DEFAULT_REPO = "twpayne/chezmoi"
DEFAULT_BASE_URL = "https://github.com"
LATEST_TAG = "latest"


@dataclass(frozen=True)
class Platform:
    """Domain model for an OS/architecture pair as named in release assets.

    ``goos`` and ``goarch`` use Go's naming (``linux``, ``amd64`` ...), since
    that is what the published archive names are built from. ``libc`` is only
    set for targets that ship separate glibc and musl builds.
    """

    goos: str
    goarch: str
    libc: str | None = None

    @property
    def is_windows(self) -> bool:
        return self.goos == "windows"

    @property
    def goos_extra(self) -> str:
        """Suffix appended to the OS part of the archive name."""
        return f"-{self.libc}" if self.libc else ""

    @property
    def archive_format(self) -> str:
        return "zip" if self.is_windows else "tar.gz"

    @property
    def binary_suffix(self) -> str:
        return ".exe" if self.is_windows else ""

    @property
    def label(self) -> str:
        """Return the ``<goos><goos_extra>_<goarch>`` fragment used in names."""
        return f"{self.goos}{self.goos_extra}_{self.goarch}"


def version_from_tag(tag: str) -> str:
    """Strip the leading ``v`` from a release tag (``v2.52.0`` -> ``2.52.0``)."""
    return tag[1:] if tag.startswith("v") else tag


@dataclass(frozen=True)
class ReleaseAsset:
    """Domain model describing the files that make up one platform release.

    The naming rules follow the archives published by goreleaser::

        <project>_<version>_<goos><goos_extra>_<goarch>.<format>
        <project>_<version>_checksums.txt
    """

    tag: str
    platform: Platform
    project: str = DEFAULT_PROJECT
    repo: str = DEFAULT_REPO
    base_url: str = DEFAULT_BASE_URL

    @property
    def version(self) -> str:
        return version_from_tag(self.tag)

    @property
    def archive_name(self) -> str:
        return (
            f"{self.project}_{self.version}_{self.platform.label}"
            f".{self.platform.archive_format}"
        )

    @property
    def checksums_name(self) -> str:
        return f"{self.project}_{self.version}_checksums.txt"

    @property
    def binary_name(self) -> str:
        return f"{self.project}{self.platform.binary_suffix}"

    def download_url(self, filename: str) -> str:
        """Return the download URL of ``filename`` within this release."""
        return (
            f"{self.base_url.rstrip('/')}/{self.repo}/releases/download/"
            f"{self.tag}/{filename}"
        )

    @property
    def archive_url(self) -> str:
        return self.download_url(self.archive_name)

    @property
    def checksums_url(self) -> str:
        return self.download_url(self.checksums_name)
