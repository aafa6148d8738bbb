from __future__ import annotations

import hashlib
from pathlib import Path

import pytest

from chezinstall.domain.errors import (
    ChecksumMismatchError,
    ChecksumNotFoundError,
    MissingToolError,
)
from chezinstall.infrastructure.checksums import (
    hash_sha256,
    hash_sha256_verify,
    parse_checksums,
)


def _write_archive(tmp_path: Path, name: str = "tool_1.0.0_linux_amd64.tar.gz") -> Path:
    path = tmp_path / name
    path.write_bytes(b"archive payload")
    return path


def test_hash_sha256_matches_hashlib(tmp_path: Path) -> None:
    archive = _write_archive(tmp_path)
    assert hash_sha256(archive) == hashlib.sha256(b"archive payload").hexdigest()


def test_hash_sha256_unknown_algorithm(tmp_path: Path) -> None:
    archive = _write_archive(tmp_path)
    with pytest.raises(MissingToolError):
        hash_sha256(archive, algorithm="not-a-real-hash")


def test_parse_checksums_handles_tabs_and_binary_marker() -> None:
    text = "aaa  one.tar.gz\nbbb\ttwo.zip\nccc *three.tar\n\nmalformed\n"
    assert parse_checksums(text) == {
        "one.tar.gz": "aaa",
        "two.zip": "bbb",
        "three.tar": "ccc",
    }


def test_verify_succeeds_for_matching_digest(tmp_path: Path) -> None:
    archive = _write_archive(tmp_path)
    digest = hashlib.sha256(b"archive payload").hexdigest()
    checksums = tmp_path / "checksums.txt"
    checksums.write_text(
        f"{'f' * 64}  tool_1.0.0_darwin_arm64.tar.gz\n{digest}  {archive.name}\n",
        encoding="utf-8",
    )
    assert hash_sha256_verify(archive, checksums) == digest


def test_verify_fails_on_mismatch(tmp_path: Path) -> None:
    archive = _write_archive(tmp_path)
    checksums = tmp_path / "checksums.txt"
    checksums.write_text(f"{'0' * 64}  {archive.name}\n", encoding="utf-8")
    with pytest.raises(ChecksumMismatchError, match="did not verify"):
        hash_sha256_verify(archive, checksums)


def test_verify_is_exact_string_comparison(tmp_path: Path) -> None:
    archive = _write_archive(tmp_path)
    digest = hashlib.sha256(b"archive payload").hexdigest()
    checksums = tmp_path / "checksums.txt"
    checksums.write_text(f"{digest.upper()}  {archive.name}\n", encoding="utf-8")
    with pytest.raises(ChecksumMismatchError):
        hash_sha256_verify(archive, checksums)


def test_verify_requires_exact_filename(tmp_path: Path) -> None:
    archive = _write_archive(tmp_path)
    digest = hashlib.sha256(b"archive payload").hexdigest()
    checksums = tmp_path / "checksums.txt"
    checksums.write_text(f"{digest}  {archive.name}.sig\n", encoding="utf-8")
    with pytest.raises(ChecksumNotFoundError, match="unable to find checksum"):
        hash_sha256_verify(archive, checksums)


def test_verify_missing_checksums_file(tmp_path: Path) -> None:
    archive = _write_archive(tmp_path)
    with pytest.raises(ChecksumNotFoundError):
        hash_sha256_verify(archive, tmp_path / "absent.txt")
