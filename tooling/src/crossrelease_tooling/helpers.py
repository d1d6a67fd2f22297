"""Shared helpers for crossrelease_tooling (manifest reading, hashing, dedupe).

Used by build, package, release, and the CLI.
"""

from __future__ import annotations

import hashlib
import re
from collections.abc import Iterable
from pathlib import Path

_VERSION_LINE = re.compile(r'^\s*version\s*=\s*"([^"]*)"')
_NAME_LINE = re.compile(r'^\s*name\s*=\s*"([^"]+)"')

# --- Manifest ---


def read_manifest_version(manifest: Path) -> str:
    """Version from the first `version = "X.Y.Z"` line in manifest. Raises SystemExit if missing or empty."""
    if not manifest.is_file():
        msg = f"Manifest not found: {manifest}"
        raise SystemExit(msg)
    for line in manifest.read_text().splitlines():
        m = _VERSION_LINE.match(line)
        if m:
            version = m.group(1).strip()
            if not version:
                msg = f"Empty version in {manifest}"
                raise SystemExit(msg)
            return version
    msg = f'Could not find a version = "..." line in {manifest}'
    raise SystemExit(msg)


def read_manifest_name(manifest: Path) -> str | None:
    """[package].name from manifest, or None when absent."""
    if not manifest.is_file():
        return None
    in_sec = False
    for line in manifest.read_text().splitlines():
        s = line.strip()
        if s.startswith("["):
            in_sec = s.strip("[]").strip() == "package"
            continue
        if in_sec:
            m = _NAME_LINE.match(line)
            if m:
                return m.group(1)
    return None


# --- Hashing ---


def sha256_file(path: Path, chunk_size: int = 1024 * 1024) -> str:
    """Lowercase hex SHA-256 of the file at path."""
    digest = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            digest.update(chunk)
    return digest.hexdigest()


# --- Lists ---


def unique_in_order(items: Iterable[str]) -> list[str]:
    """Drop empty strings and duplicates, keeping first occurrence order. Values are not altered."""
    seen: set[str] = set()
    out: list[str] = []
    for item in items:
        if not item or item in seen:
            continue
        seen.add(item)
        out.append(item)
    return out
