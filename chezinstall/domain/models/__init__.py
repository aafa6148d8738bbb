"""Domain models for chezinstall."""

from .release import (
    DEFAULT_BASE_URL,
    DEFAULT_PROJECT,
    DEFAULT_REPO,
    LATEST_TAG,
    Platform,
    ReleaseAsset,
    version_from_tag,
)

__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_PROJECT",
    "DEFAULT_REPO",
    "LATEST_TAG",
    "Platform",
    "ReleaseAsset",
    "version_from_tag",
]
