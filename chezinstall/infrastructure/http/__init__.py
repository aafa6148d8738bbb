"""HTTP adapters for chezinstall.

This package provides the release index client used to resolve tags and
download release archives.
"""

from .client import ReleaseHttpClient
from .dto import ReleaseMetadata

__all__ = [
    "ReleaseHttpClient",
    "ReleaseMetadata",
]
