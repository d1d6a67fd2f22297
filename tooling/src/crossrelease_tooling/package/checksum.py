"""SHA-256 sidecars: `<hex>  <archive-name>` in <archive-name>.sha256 next to the archive."""

from __future__ import annotations

import sys
from pathlib import Path

from crossrelease_tooling.helpers import sha256_file

SIDECAR_SUFFIX = ".sha256"


def checksum_path(archive: Path) -> Path:
    return archive.with_name(archive.name + SIDECAR_SUFFIX)


def write_checksum(archive: Path) -> Path:
    """Hash archive and write its sidecar. Returns the sidecar path. I/O errors propagate."""
    digest = sha256_file(archive)
    sidecar = checksum_path(archive)
    sidecar.write_text(f"{digest}  {archive.name}\n", encoding="utf-8", newline="\n")
    return sidecar


def read_checksum(sidecar: Path) -> tuple[str, str]:
    """(digest, filename) from a sidecar. Raises ValueError if the line is malformed."""
    line = sidecar.read_text(encoding="utf-8").rstrip("\n")
    digest, sep, filename = line.partition("  ")
    if not sep or len(digest) != 64 or not filename:
        msg = f"Malformed checksum line in {sidecar}: {line!r}"
        raise ValueError(msg)
    return digest.lower(), filename


def verify_checksum(sidecar: Path) -> bool:
    """Recompute the digest of the archive named in sidecar (same directory) and compare."""
    digest, filename = read_checksum(sidecar)
    archive = sidecar.parent / filename
    if not archive.is_file():
        print(f"❌ {filename}: archive not found next to {sidecar.name}", file=sys.stderr)
        return False
    return sha256_file(archive) == digest


def run_verify(sidecars: list[Path]) -> int:
    """Verify each sidecar. Returns 0 if all match, else 1."""
    if not sidecars:
        print("❌ No checksum files given", file=sys.stderr)
        return 1
    failed = 0
    for s in sidecars:
        try:
            ok = verify_checksum(s)
        except (OSError, ValueError) as e:
            print(f"❌ {s}: {e}", file=sys.stderr)
            failed += 1
            continue
        if ok:
            print(f"✅ {s.name}: OK")
        else:
            print(f"❌ {s.name}: checksum mismatch", file=sys.stderr)
            failed += 1
    return 1 if failed else 0
