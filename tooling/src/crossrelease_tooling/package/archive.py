"""Package a built binary into {project}{version}.{triple}.tar.xz (Linux) or .zip (Windows).

The binary is staged in a temp dir and, when upx is on PATH, compressed there
first. The build tree copy is never touched.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import tarfile
import tempfile
import zipfile
from pathlib import Path

from crossrelease_tooling.platforms import ArchiveKind, family_for

log = logging.getLogger(__name__)

DEFAULT_COMPRESSOR = "upx"


class UnsupportedTargetError(ValueError):
    """Target triple belongs to a platform family with no archive format."""

    def __init__(self, triple: str) -> None:
        self.triple = triple
        family = family_for(triple)
        if family.marker:
            detail = f"no archive format for {family.marker} targets"
        else:
            detail = "platform family not recognised (expected linux or windows)"
        super().__init__(f"Cannot package {triple}: {detail}")


def archive_kind_for(triple: str) -> ArchiveKind:
    """Archive kind for triple. Raises UnsupportedTargetError when the family has none."""
    kind = family_for(triple).archive_kind
    if kind is None:
        raise UnsupportedTargetError(triple)
    return kind


def archive_file_name(project: str, version: str, triple: str, kind: ArchiveKind) -> str:
    """{project}{version}.{triple}.{ext}, e.g. demo1.2.3.x86_64-unknown-linux-musl.tar.xz."""
    return f"{project}{version}.{triple}.{kind.extension}"


def compact_binary(binary: Path, staging_dir: Path, compressor: str = DEFAULT_COMPRESSOR) -> Path:
    """Copy binary into staging_dir and run compressor over the copy if available. Returns the copy."""
    staged = staging_dir / binary.name
    shutil.copy2(binary, staged)
    exe = shutil.which(compressor)
    if exe is None:
        log.debug("%s not on PATH; packaging %s uncompressed", compressor, binary.name)
        return staged
    r = subprocess.run(
        [exe, "--best", "-q", str(staged)],
        capture_output=True,
        text=True,
    )
    if r.returncode != 0:
        # upx rewrites in place only on success; on failure the plain copy is intact.
        log.warning("%s failed on %s (exit %d): %s", compressor, binary.name, r.returncode, r.stderr.strip())
    return staged


def _write_tar_xz(archive: Path, src: Path, arcname: str) -> None:
    with tarfile.open(archive, mode="w:xz", preset=9) as tar:
        tar.add(src, arcname=arcname)


def _write_zip(archive: Path, src: Path, arcname: str) -> None:
    with zipfile.ZipFile(archive, mode="w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.write(src, arcname=arcname)


_WRITERS = {
    ArchiveKind.TAR_XZ: _write_tar_xz,
    ArchiveKind.ZIP: _write_zip,
}


def package_binary(
    triple: str,
    version: str,
    binary: Path,
    out_dir: Path,
    project: str,
    compress: bool = True,
    compressor: str = DEFAULT_COMPRESSOR,
) -> Path:
    """Write the archive for triple into out_dir (created if absent). Returns the archive path.

    Raises UnsupportedTargetError for families without an archive format,
    FileNotFoundError if binary is missing, and archiver errors as raised.
    """
    kind = archive_kind_for(triple)
    if not binary.is_file():
        msg = f"Binary not found: {binary}"
        raise FileNotFoundError(msg)

    out_dir.mkdir(parents=True, exist_ok=True)
    archive = out_dir / archive_file_name(project, version, triple, kind)
    arcname = binary.name

    with tempfile.TemporaryDirectory(prefix="crossrelease-") as staging:
        src = compact_binary(binary, Path(staging), compressor) if compress else binary
        try:
            _WRITERS[kind](archive, src, arcname)
        except Exception:
            archive.unlink(missing_ok=True)
            raise

    print(f"📦 {triple}: {archive.name}")
    return archive
