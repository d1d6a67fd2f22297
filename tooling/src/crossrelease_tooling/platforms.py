"""Platform families recognised in target triples.

Each family carries what the pipeline needs to know about it: the marker
substring that identifies it in a triple, the archive kind used to ship it,
the binary extension, and the cargo features enabled by default.
"""

from __future__ import annotations

from enum import Enum


class ArchiveKind(Enum):
    TAR_XZ = "tar.xz"
    ZIP = "zip"

    @property
    def extension(self) -> str:
        return self.value


class PlatformFamily(Enum):
    LINUX = ("linux", ArchiveKind.TAR_XZ, "", ("local-redirect",))
    WINDOWS = ("windows", ArchiveKind.ZIP, ".exe", ())
    # macOS builds get the feature but there is no archive format for them yet.
    DARWIN = ("darwin", None, "", ("local-redirect",))
    UNSUPPORTED = ("", None, "", ())

    def __init__(
        self,
        marker: str,
        archive_kind: ArchiveKind | None,
        binary_ext: str,
        default_features: tuple[str, ...],
    ) -> None:
        self.marker = marker
        self.archive_kind = archive_kind
        self.binary_ext = binary_ext
        self.default_features = default_features


_MATCH_ORDER = (PlatformFamily.LINUX, PlatformFamily.WINDOWS, PlatformFamily.DARWIN)


def family_for(triple: str) -> PlatformFamily:
    """Platform family by substring match on the triple (linux, windows, darwin), else UNSUPPORTED."""
    for family in _MATCH_ORDER:
        if family.marker in triple:
            return family
    return PlatformFamily.UNSUPPORTED


def binary_file_name(binary: str, triple: str) -> str:
    """Binary file name as cargo writes it for triple (adds .exe on Windows)."""
    return f"{binary}{family_for(triple).binary_ext}"
