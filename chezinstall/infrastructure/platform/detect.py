"""Detection of the running OS, CPU architecture and C library.

Names are normalised to the Go conventions used by release archive names.
``platform.system()`` and ``platform.machine()`` stand in for ``uname -s`` and
``uname -m``; both can be overridden for testing.
"""

from __future__ import annotations

import os
import platform as _platform
import re
import shutil
import subprocess

from chezinstall.domain.errors import UnsupportedPlatformError
from chezinstall.domain.models import Platform
from chezinstall.infrastructure.observability import get_logger

logger = get_logger(__name__)

# Release builds target glibc 2.35 (ubuntu-22.04 builders); older systems
# get the statically linked musl build instead.
MINIMUM_GLIBC_VERSION = (2, 35)

SUPPORTED_PLATFORMS: frozenset[str] = frozenset(
    {
        "darwin/amd64",
        "darwin/arm64",
        "freebsd/amd64",
        "freebsd/arm",
        "freebsd/arm64",
        "freebsd/i386",
        "freebsd/riscv64",
        "illumos/amd64",
        "linux/amd64",
        "linux/arm",
        "linux/arm64",
        "linux/i386",
        "linux/loong64",
        "linux/mips64",
        "linux/mips64le",
        "linux/ppc64",
        "linux/ppc64le",
        "linux/riscv64",
        "linux/s390x",
        "netbsd/amd64",
        "netbsd/arm",
        "netbsd/arm64",
        "netbsd/i386",
        "openbsd/amd64",
        "openbsd/arm",
        "openbsd/arm64",
        "openbsd/i386",
        "solaris/amd64",
        "windows/amd64",
        "windows/arm",
        "windows/arm64",
        "windows/i386",
    }
)

_ARCH_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "x64": "amd64",
    "i386": "i386",
    "i486": "i386",
    "i586": "i386",
    "i686": "i386",
    "x86": "i386",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv8l": "arm",
    "arm": "arm",
    "loongarch64": "loong64",
    "mips64": "mips64",
    "mips64el": "mips64le",
    "ppc64": "ppc64",
    "ppc64le": "ppc64le",
    "riscv64": "riscv64",
    "s390x": "s390x",
}


def get_goos(system: str | None = None) -> str:
    """Return the Go OS name for ``system`` (defaults to the running OS)."""
    raw = (system if system is not None else _platform.system()).lower()
    if raw.startswith(("cygwin_nt", "mingw", "msys_nt")) or raw == "windows":
        return "windows"
    if raw == "sunos":
        return "solaris"
    if raw in {"darwin", "freebsd", "illumos", "linux", "netbsd", "openbsd"}:
        return raw
    logger.critical(f"get_goos unsupported operating system {raw or '(empty)'}")
    raise UnsupportedPlatformError(f"unsupported operating system: {raw}")


def get_goarch(machine: str | None = None) -> str:
    """Return the Go architecture name for ``machine`` (``uname -m`` style)."""
    raw = (machine if machine is not None else _platform.machine()).lower()
    if raw in _ARCH_ALIASES:
        return _ARCH_ALIASES[raw]
    if re.match(r"armv[5-7]", raw):
        return "arm"
    logger.critical(f"get_goarch unsupported architecture {raw or '(empty)'}")
    raise UnsupportedPlatformError(f"unsupported architecture: {raw}")


def check_goos_goarch(goos: str, goarch: str) -> None:
    """Raise unless ``goos/goarch`` is a published release target."""
    pair = f"{goos}/{goarch}"
    if pair not in SUPPORTED_PLATFORMS:
        logger.critical(f"{pair} is not supported")
        raise UnsupportedPlatformError(f"{pair} is not supported")


def parse_glibc_version(text: str) -> tuple[int, ...] | None:
    """Extract the version from ``ldd --version`` output.

    The first line looks like ``ldd (Ubuntu GLIBC 2.35-0ubuntu3) 2.35``; the
    version is its last field.
    """
    for line in text.splitlines():
        fields = line.split()
        if fields and fields[0] == "ldd":
            match = re.match(r"(\d+)\.(\d+)", fields[-1])
            if match:
                return tuple(int(part) for part in match.groups())
    return None


def classify_ldd_output(text: str) -> str | None:
    """Return ``glibc``, ``musl`` or ``None`` for ``ldd --version`` output."""
    lowered = text.lower()
    if "glibc" in lowered or "gnu libc" in lowered:
        version = parse_glibc_version(text)
        if version is not None:
            version_str = ".".join(str(p) for p in version)
            logger.info(f"found glibc version {version_str}")
            if version < MINIMUM_GLIBC_VERSION:
                return "musl"
        return "glibc"
    if "musl" in lowered:
        return "musl"
    return None


def _run_ldd() -> str | None:
    ldd = shutil.which("ldd")
    if ldd is None:
        return None
    # musl's ldd prints its banner to stderr and exits non-zero
    result = subprocess.run(
        [ldd, "--version"],
        capture_output=True,
        text=True,
        check=False,
    )
    return (result.stdout or "") + (result.stderr or "")


def _confstr_libc() -> str | None:
    try:
        return os.confstr("CS_GNU_LIBC_VERSION")
    except (AttributeError, ValueError, OSError):
        return None


def get_libc() -> str:
    """Determine whether the system C library is glibc or musl."""
    output = _run_ldd()
    if output is not None:
        libc = classify_ldd_output(output)
        if libc is not None:
            return libc

    confstr = _confstr_libc()
    if confstr and "glibc" in confstr.lower():
        return "glibc"

    logger.critical("unable to determine libc")
    raise UnsupportedPlatformError("unable to determine libc")


def detect_platform(
    system: str | None = None, machine: str | None = None
) -> Platform:
    """Detect the release :class:`Platform` for this machine.

    libc is only probed for ``linux/amd64``, the one target published in both
    glibc and musl flavours.
    """
    goos = get_goos(system)
    goarch = get_goarch(machine)
    check_goos_goarch(goos, goarch)
    libc = get_libc() if (goos, goarch) == ("linux", "amd64") else None
    return Platform(goos=goos, goarch=goarch, libc=libc)


__all__ = [
    "MINIMUM_GLIBC_VERSION",
    "SUPPORTED_PLATFORMS",
    "check_goos_goarch",
    "classify_ldd_output",
    "detect_platform",
    "get_goarch",
    "get_goos",
    "get_libc",
    "parse_glibc_version",
]
