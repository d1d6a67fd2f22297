"""Release build of one target triple with cross (or cargo for the host).

Linux and macOS triples get the local-redirect feature; Windows and other
families build without it. Binaries land in target/{triple}/release/.
"""

from __future__ import annotations

import logging
import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path

from crossrelease_tooling.helpers import unique_in_order
from crossrelease_tooling.platforms import binary_file_name, family_for

log = logging.getLogger(__name__)

DEFAULT_BUILD_TOOL = "cross"

# Exit status reported when the build tool exceeds its timeout (matches coreutils timeout).
TIMEOUT_EXIT_CODE = 124


def features_for(triple: str, extra: Sequence[str] = ()) -> list[str]:
    """Family default features for triple plus extra, deduplicated in order."""
    return unique_in_order([*family_for(triple).default_features, *extra])


def build_command(
    triple: str,
    tool: str = DEFAULT_BUILD_TOOL,
    features: Sequence[str] | None = None,
) -> list[str]:
    """`<tool> build --release --target <triple> [--features a,b]`."""
    if features is None:
        features = features_for(triple)
    cmd = [tool, "build", "--release", "--target", triple]
    if features:
        cmd += ["--features", ",".join(features)]
    return cmd


def binary_path(project_root: Path, triple: str, binary: str) -> Path:
    """target/{triple}/release/{binary}[.exe] under project_root."""
    return project_root / "target" / triple / "release" / binary_file_name(binary, triple)


def run_build(
    project_root: Path,
    triple: str,
    tool: str = DEFAULT_BUILD_TOOL,
    extra_features: Sequence[str] = (),
    timeout: float | None = None,
) -> int:
    """Build triple in release mode from project_root. Returns the build tool's exit status."""
    cmd = build_command(triple, tool, features_for(triple, extra_features))
    print(f"🔨 Building {triple}...")
    log.debug("Running %s in %s", " ".join(cmd), project_root)
    try:
        r = subprocess.run(cmd, cwd=str(project_root), timeout=timeout)
    except FileNotFoundError:
        print(f"❌ Build tool not found: {tool}", file=sys.stderr)
        return 127
    except subprocess.TimeoutExpired:
        print(f"❌ Build for {triple} timed out after {timeout}s", file=sys.stderr)
        return TIMEOUT_EXIT_CODE
    if r.returncode != 0:
        print(f"❌ Build failed for {triple} (exit {r.returncode})", file=sys.stderr)
    return r.returncode
