"""Infrastructure layer for chezinstall.

Holds adapters for HTTP, host platform detection, checksum verification,
archive extraction and logging.
"""

from . import archives, checksums, http, observability, platform

__all__ = ["archives", "checksums", "http", "observability", "platform"]
