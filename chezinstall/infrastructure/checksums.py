"""SHA-256 helpers for verifying downloaded release archives."""

from __future__ import annotations

import hashlib
from pathlib import Path

from chezinstall.domain.errors import (
    ChecksumMismatchError,
    ChecksumNotFoundError,
    MissingToolError,
)
from chezinstall.infrastructure.observability import get_logger

logger = get_logger(__name__)

_BLOCK_SIZE = 1024 * 1024


def hash_sha256(target: Path | str, algorithm: str = "sha256") -> str:
    """Return the lowercase hex digest of ``target``."""
    try:
        digest = hashlib.new(algorithm)
    except ValueError as exc:
        logger.critical(
            f"hash_sha256 unable to find command to compute {algorithm.upper()} hash")
        raise MissingToolError(
            f"no {algorithm} implementation available") from exc
    with open(target, "rb") as f:
        for block in iter(lambda: f.read(_BLOCK_SIZE), b""):
            digest.update(block)
    return digest.hexdigest()


def parse_checksums(text: str) -> dict[str, str]:
    """Parse ``<hash> <filename>`` lines into a filename -> digest mapping.

    Tabs and repeated spaces are accepted as separators, and the ``*``
    binary-mode marker written by ``sha256sum -b`` is dropped. Lines without
    two fields are skipped.
    """
    entries: dict[str, str] = {}
    for line in text.splitlines():
        parts = line.split(None, 1)
        if len(parts) != 2:
            continue
        digest, filename = parts
        filename = filename.strip().lstrip("*")
        entries.setdefault(filename, digest.strip())
    return entries


def hash_sha256_verify(target: Path | str, checksums: Path | str) -> str:
    """Verify ``target`` against its entry in the ``checksums`` file.

    Returns the verified digest.

    Raises:
        ChecksumNotFoundError: If no entry names the target's basename.
        ChecksumMismatchError: If the recorded and computed digests differ.
    """
    target = Path(target)
    checksums = Path(checksums)
    try:
        text = checksums.read_text(encoding="utf-8")
    except OSError:
        text = ""

    want = parse_checksums(text).get(target.name)
    if not want:
        logger.error(
            f"hash_sha256_verify unable to find checksum for {target} in {checksums}")
        raise ChecksumNotFoundError(
            f"unable to find checksum for {target} in {checksums}")

    got = hash_sha256(target)
    if want != got:
        logger.error(
            f"hash_sha256_verify checksum for {target} did not verify {want} vs {got}")
        raise ChecksumMismatchError(
            f"checksum for {target} did not verify {want} vs {got}")
    return got


__all__ = ["hash_sha256", "hash_sha256_verify", "parse_checksums"]
