"""Host platform detection."""

from .detect import (
    SUPPORTED_PLATFORMS,
    check_goos_goarch,
    detect_platform,
    get_goarch,
    get_goos,
    get_libc,
)

__all__ = [
    "SUPPORTED_PLATFORMS",
    "check_goos_goarch",
    "detect_platform",
    "get_goarch",
    "get_goos",
    "get_libc",
]
