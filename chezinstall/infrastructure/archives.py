"""Archive extraction for release downloads.

The extractor is picked from the file name alone:

- ``.tar.gz`` / ``.tgz``: gzip-compressed tar
- ``.tar``: plain tar
- ``.zip``: zip

Any other name is rejected before the file is opened.
"""

from __future__ import annotations

import tarfile
import zipfile
from pathlib import Path
from typing import Callable

from chezinstall.domain.errors import ExtractionError, UnknownArchiveFormatError
from chezinstall.infrastructure.observability import get_logger

logger = get_logger(__name__)

Extractor = Callable[[Path, Path], list[str]]


def _check_member(dest: Path, name: str) -> None:
    resolved = (dest / name).resolve()
    if resolved != dest and dest not in resolved.parents:
        raise ExtractionError(f"archive member {name!r} escapes {dest}")


def _extract_tar(tarball: Path, dest: Path, mode: str) -> list[str]:
    with tarfile.open(tarball, mode) as tar:
        members = tar.getmembers()
        for member in members:
            _check_member(dest, member.name)
            if member.issym():
                _check_member(dest, str(Path(member.name).parent / member.linkname))
            elif member.islnk():
                _check_member(dest, member.linkname)
        if hasattr(tarfile, "data_filter"):
            tar.extractall(dest, members=members, filter="data")
        else:
            tar.extractall(dest, members=members)
        return [m.name for m in members]


def extract_tar_gz(tarball: Path, dest: Path) -> list[str]:
    return _extract_tar(tarball, dest, "r:gz")


def extract_tar(tarball: Path, dest: Path) -> list[str]:
    return _extract_tar(tarball, dest, "r:")


def extract_zip(archive: Path, dest: Path) -> list[str]:
    with zipfile.ZipFile(archive) as zf:
        names = zf.namelist()
        for name in names:
            _check_member(dest, name)
        zf.extractall(dest)
        return names


EXTRACTORS: dict[str, Extractor] = {
    ".tar.gz": extract_tar_gz,
    ".tgz": extract_tar_gz,
    ".tar": extract_tar,
    ".zip": extract_zip,
}


def extractor_for(tarball: Path | str) -> Extractor:
    """Return the extractor for ``tarball``'s extension.

    Raises:
        UnknownArchiveFormatError: If the extension is not supported.
    """
    name = Path(tarball).name.lower()
    for suffix, extractor in EXTRACTORS.items():
        if name.endswith(suffix):
            return extractor
    logger.error(f"untar unknown archive format for {tarball}")
    raise UnknownArchiveFormatError(f"unknown archive format for {tarball}")


def untar(tarball: Path | str, dest: Path | str) -> list[str]:
    """Extract ``tarball`` into ``dest`` and return the member names."""
    tarball = Path(tarball)
    extractor = extractor_for(tarball)
    dest = Path(dest).resolve()
    dest.mkdir(parents=True, exist_ok=True)
    try:
        return extractor(tarball, dest)
    except (tarfile.TarError, zipfile.BadZipFile, EOFError, OSError) as exc:
        logger.error(f"untar failed to extract {tarball}: {exc}")
        raise ExtractionError(f"failed to extract {tarball}: {exc}") from exc
    except ExtractionError as exc:
        logger.error(f"untar {exc}")
        raise


__all__ = [
    "EXTRACTORS",
    "extract_tar",
    "extract_tar_gz",
    "extract_zip",
    "extractor_for",
    "untar",
]
