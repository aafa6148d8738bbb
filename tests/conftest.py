from __future__ import annotations

import hashlib
import io
import tarfile
from pathlib import Path

import pytest
from requests import Response

from chezinstall.domain.models import Platform, ReleaseAsset

LINUX_AMD64 = Platform(goos="linux", goarch="amd64", libc="glibc")


def make_response(
    body: bytes | str, status_code: int = 200, headers: dict | None = None
) -> Response:
    resp = Response()
    resp._content = body.encode("utf-8") if isinstance(body, str) else body
    resp._content_consumed = True
    resp.status_code = status_code
    if headers:
        resp.headers.update(headers)
    return resp


class FakeSession:
    """Stand-in for ``requests.Session`` serving canned responses by URL."""

    def __init__(self, routes: dict[str, Response] | None = None) -> None:
        self.routes = dict(routes or {})
        self.calls: list[tuple[str, dict]] = []

    def get(self, url: str, **kwargs) -> Response:
        self.calls.append((url, kwargs))
        if url in self.routes:
            return self.routes[url]
        return make_response("Not Found", status_code=404)


def build_tar_gz(path: Path, members: dict[str, bytes]) -> Path:
    with tarfile.open(path, "w:gz") as tar:
        for name, data in members.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = 0o755
            tar.addfile(info, io.BytesIO(data))
    return path


@pytest.fixture
def release_routes(tmp_path: Path):
    """Serve a v2.52.0 release for linux/amd64/glibc from a fake session."""

    asset = ReleaseAsset(tag="v2.52.0", platform=LINUX_AMD64)
    archive = build_tar_gz(
        tmp_path / asset.archive_name,
        {
            "chezmoi": b"#!/bin/sh\necho chezmoi\n",
            "LICENSE": b"MIT\n",
            "README.md": b"readme\n",
        },
    )
    archive_bytes = archive.read_bytes()
    digest = hashlib.sha256(archive_bytes).hexdigest()
    checksums = (
        f"{'0' * 64}  chezmoi_2.52.0_darwin_arm64.tar.gz\n"
        f"{digest}  {asset.archive_name}\n"
    )
    routes = {
        "https://github.com/twpayne/chezmoi/releases/latest": make_response(
            '{"tag_name":"v2.52.0","name":"v2.52.0"}'
        ),
        asset.archive_url: make_response(archive_bytes),
        asset.checksums_url: make_response(checksums),
    }
    return asset, routes
