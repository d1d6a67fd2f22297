"""Release archives (tar.xz / zip) and their SHA-256 sidecars."""

from .archive import (
    UnsupportedTargetError,
    archive_file_name,
    archive_kind_for,
    compact_binary,
    package_binary,
)
from .checksum import checksum_path, read_checksum, run_verify, verify_checksum, write_checksum

__all__ = [
    "UnsupportedTargetError",
    "archive_file_name",
    "archive_kind_for",
    "checksum_path",
    "compact_binary",
    "package_binary",
    "read_checksum",
    "run_verify",
    "verify_checksum",
    "write_checksum",
]
