from __future__ import annotations

import io
import tarfile
import zipfile
from pathlib import Path

import pytest

from chezinstall.domain.errors import ExtractionError, UnknownArchiveFormatError
from chezinstall.infrastructure.archives import (
    extract_tar,
    extract_tar_gz,
    extract_zip,
    extractor_for,
    untar,
)

from conftest import build_tar_gz


@pytest.mark.parametrize(
    "name,expected",
    [
        ("tool_1.0.0_linux_amd64.tar.gz", extract_tar_gz),
        ("tool.TGZ", extract_tar_gz),
        ("tool.tar", extract_tar),
        ("tool_1.0.0_windows_amd64.zip", extract_zip),
    ],
)
def test_extractor_dispatch(name, expected) -> None:
    assert extractor_for(name) is expected


@pytest.mark.parametrize(
    "name", ["tool.tar.xz", "tool.tar.bz2", "tool.7z", "tool", "tool.gz"]
)
def test_unknown_extension_is_rejected(tmp_path: Path, name: str) -> None:
    archive = tmp_path / name
    archive.write_bytes(b"whatever")
    with pytest.raises(UnknownArchiveFormatError, match="unknown archive format"):
        untar(archive, tmp_path / "out")
    assert not (tmp_path / "out").exists()


def test_untar_tar_gz(tmp_path: Path) -> None:
    archive = build_tar_gz(tmp_path / "tool.tar.gz", {"tool": b"bin", "docs/README": b"r"})
    names = untar(archive, tmp_path / "out")
    assert sorted(names) == ["docs/README", "tool"]
    assert (tmp_path / "out" / "tool").read_bytes() == b"bin"


def test_untar_plain_tar(tmp_path: Path) -> None:
    archive = tmp_path / "tool.tar"
    with tarfile.open(archive, "w") as tar:
        info = tarfile.TarInfo("tool")
        info.size = 3
        tar.addfile(info, io.BytesIO(b"bin"))
    untar(archive, tmp_path / "out")
    assert (tmp_path / "out" / "tool").read_bytes() == b"bin"


def test_untar_zip(tmp_path: Path) -> None:
    archive = tmp_path / "tool.zip"
    with zipfile.ZipFile(archive, "w") as zf:
        zf.writestr("tool.exe", b"MZ")
    untar(archive, tmp_path / "out")
    assert (tmp_path / "out" / "tool.exe").read_bytes() == b"MZ"


def test_corrupt_archive_raises_extraction_error(tmp_path: Path) -> None:
    archive = tmp_path / "tool.tar.gz"
    archive.write_bytes(b"not gzip at all")
    with pytest.raises(ExtractionError):
        untar(archive, tmp_path / "out")


def test_member_escaping_destination_is_rejected(tmp_path: Path) -> None:
    archive = build_tar_gz(tmp_path / "evil.tar.gz", {"../escape": b"x"})
    with pytest.raises(ExtractionError, match="escapes"):
        untar(archive, tmp_path / "out")
    assert not (tmp_path / "escape").exists()
