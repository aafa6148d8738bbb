"""Exception hierarchy for the installer.

Every failure the installer can hit is an :class:`InstallerError`; the CLI
catches that base class and exits non-zero. Failures are logged where they
are detected.
"""

from __future__ import annotations


class InstallerError(Exception):
    """Base class for installer failures."""


class ConfigError(InstallerError):
    """Raised when configuration values are missing or malformed."""


class MissingToolError(InstallerError):
    """Raised when a required tool or library is unavailable."""


class UnsupportedPlatformError(InstallerError):
    """Raised when the OS, architecture or libc cannot be mapped to a release."""


class DownloadError(InstallerError):
    """Raised when an HTTP request does not return a usable 200 response."""


class ReleaseResolutionError(InstallerError):
    """Raised when a tag cannot be resolved to a concrete release."""


class ChecksumNotFoundError(InstallerError):
    """Raised when the checksums file has no entry for an archive."""


class ChecksumMismatchError(InstallerError):
    """Raised when an archive's digest differs from the recorded one."""


class UnknownArchiveFormatError(InstallerError):
    """Raised when an archive extension has no known extractor."""


class ExtractionError(InstallerError):
    """Raised when an archive is corrupt or contains unsafe members."""


__all__ = [
    "ChecksumMismatchError",
    "ChecksumNotFoundError",
    "ConfigError",
    "DownloadError",
    "ExtractionError",
    "InstallerError",
    "MissingToolError",
    "ReleaseResolutionError",
    "UnknownArchiveFormatError",
    "UnsupportedPlatformError",
]
