"""Fetch published sources from a PyPI-compatible JSON API.

Each ``name@version`` is downloaded once and unpacked into
``{cache_dir}/{name}-{version}/``. A pure-python wheel is preferred over the
sdist because it contains exactly the shipped modules. For a wheel a minimal
``pyproject.toml`` is written next to the unpacked files so both kinds are
read through the same manifest code.
"""

from __future__ import annotations

import hashlib
import io
import json
import re
import shutil
import tarfile
import tempfile
import zipfile
from pathlib import Path, PurePosixPath
from typing import Any

import httpx
import structlog

from pubapi.apidoc.manifest import MANIFEST_NAME, Manifest, read_manifest
from pubapi.config.models import RegistryConfig
from pubapi.registry.errors import (
    DigestMismatchError,
    DownloadError,
    NoDistributionError,
    PackageNotFoundError,
    UnsafeArchiveError,
)

log = structlog.get_logger()

COMPLETE_MARKER = ".pubapi-complete"
_PURE_WHEEL_TAGS = ("-py3-none-any.whl", "-py2.py3-none-any.whl")


def normalize_name(name: str) -> str:
    """PEP 503 normalized project name."""
    return re.sub(r"[-_.]+", "-", name).lower()


def fetch_published(
    name: str,
    version: str,
    config: RegistryConfig,
    client: httpx.Client | None = None,
    package: str | None = None,
) -> Manifest:
    """Make ``name@version`` available locally and return its manifest.

    Args:
        name: Project name on the index.
        version: Exact version.
        config: Index URL, cache directory and timeout.
        client: HTTP client to use. One is created (and closed) when omitted.
        package: Import name override.

    Raises:
        RegistryError: Not found, transport failure, digest mismatch, or no
            usable distribution.
    """
    dest = Path(config.cache_dir) / f"{normalize_name(name)}-{version}"
    if (dest / COMPLETE_MARKER).is_file():
        log.debug("registry_cache_hit", name=name, version=version, path=str(dest))
        return _read_cached(dest, package)

    owns_client = client is None
    http = client or httpx.Client(timeout=config.timeout_sec, follow_redirects=True)
    try:
        release = _get_release(http, config.index_url, name, version)
        dist = _select_distribution(name, version, release.get("urls") or [])
        payload = _download(http, dist["url"])
    finally:
        if owns_client:
            http.close()

    _verify(dist["filename"], payload, (dist.get("digests") or {}).get("sha256"))
    _unpack(dist, payload, dest, name, version)
    log.info("registry_fetched", name=name, version=version, file=dist["filename"])
    return _read_cached(dest, package)


# =============================================================================
# HTTP
# =============================================================================


def _get_release(client: httpx.Client, index_url: str, name: str, version: str) -> dict[str, Any]:
    url = f"{index_url}/{name}/{version}/json"
    try:
        response = client.get(url)
    except httpx.HTTPError as e:
        raise DownloadError(url, str(e)) from e
    if response.status_code == 404:
        raise PackageNotFoundError(name, version, index_url)
    if response.status_code != 200:
        raise DownloadError(url, f"HTTP {response.status_code}")
    try:
        data = response.json()
    except json.JSONDecodeError as e:
        raise DownloadError(url, f"invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise DownloadError(url, "unexpected response shape")
    return data


def _download(client: httpx.Client, url: str) -> bytes:
    try:
        response = client.get(url)
    except httpx.HTTPError as e:
        raise DownloadError(url, str(e)) from e
    if response.status_code != 200:
        raise DownloadError(url, f"HTTP {response.status_code}")
    return response.content


def _select_distribution(name: str, version: str, urls: list[dict[str, Any]]) -> dict[str, Any]:
    for dist in urls:
        if dist.get("packagetype") == "bdist_wheel" and dist.get("filename", "").endswith(
            _PURE_WHEEL_TAGS
        ):
            return dist
    for dist in urls:
        if dist.get("packagetype") == "sdist":
            return dist
    raise NoDistributionError(name, version, "no pure-python wheel and no sdist")


def _verify(filename: str, payload: bytes, expected: str | None) -> None:
    if not expected:
        log.warning("registry_no_digest", file=filename)
        return
    actual = hashlib.sha256(payload).hexdigest()
    if actual != expected.lower():
        raise DigestMismatchError(filename, expected, actual)


# =============================================================================
# Unpacking
# =============================================================================


def _check_member(filename: str, member: str) -> None:
    path = PurePosixPath(member)
    if path.is_absolute() or ".." in path.parts:
        raise UnsafeArchiveError(filename, member)


def _extract_zip(filename: str, payload: bytes, target: Path) -> None:
    with zipfile.ZipFile(io.BytesIO(payload)) as zf:
        for member in zf.namelist():
            _check_member(filename, member)
        zf.extractall(target)


def _extract_tar(filename: str, payload: bytes, target: Path) -> None:
    with tarfile.open(fileobj=io.BytesIO(payload), mode="r:*") as tf:
        for member in tf.getnames():
            _check_member(filename, member)
        tf.extractall(target, filter="data")


def _wheel_import_name(root: Path) -> str | None:
    """First entry of the wheel's top_level.txt, if it ships one."""
    for top_level in sorted(root.glob("*.dist-info/top_level.txt")):
        names = [line.strip() for line in top_level.read_text().splitlines() if line.strip()]
        if names:
            return names[0]
    return None


def _write_wheel_manifest(root: Path, name: str, version: str) -> None:
    lines = ["[project]", f"name = {json.dumps(name)}", f"version = {json.dumps(version)}"]
    import_name = _wheel_import_name(root)
    if import_name:
        lines += ["", "[tool.pubapi]", f"import-name = {json.dumps(import_name)}"]
    (root / MANIFEST_NAME).write_text("\n".join(lines) + "\n", encoding="utf-8")


def _sdist_root(staging: Path, filename: str, name: str, version: str) -> Path:
    entries = [p for p in staging.iterdir() if p.is_dir()]
    if len(entries) != 1 or not (entries[0] / MANIFEST_NAME).is_file():
        raise NoDistributionError(name, version, f"sdist {filename} has no {MANIFEST_NAME}")
    return entries[0]


def _unpack(dist: dict[str, Any], payload: bytes, dest: Path, name: str, version: str) -> None:
    filename = dist["filename"]
    dest.parent.mkdir(parents=True, exist_ok=True)
    staging = Path(tempfile.mkdtemp(prefix=".staging-", dir=dest.parent))
    try:
        try:
            if filename.endswith((".whl", ".zip")):
                _extract_zip(filename, payload, staging)
            else:
                _extract_tar(filename, payload, staging)
        except (zipfile.BadZipFile, tarfile.TarError) as e:
            raise NoDistributionError(name, version, f"cannot unpack {filename}: {e}") from e

        if dist.get("packagetype") == "bdist_wheel":
            root = staging
            _write_wheel_manifest(root, name, version)
        else:
            root = _sdist_root(staging, filename, name, version)

        (root / COMPLETE_MARKER).write_text(json.dumps({"filename": filename}), encoding="utf-8")
        if dest.exists():
            shutil.rmtree(dest)
        root.rename(dest)
    finally:
        if staging.exists():
            shutil.rmtree(staging)


def _read_cached(dest: Path, package: str | None) -> Manifest:
    return read_manifest(dest / MANIFEST_NAME, package)
