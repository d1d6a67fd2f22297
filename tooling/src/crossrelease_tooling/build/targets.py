"""Target matrix: explicit --target values, else the built-in default list; host triple detection."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence

from crossrelease_tooling.helpers import unique_in_order

# Release matrix when no targets are requested. Order is the build order.
DEFAULT_TARGETS: tuple[str, ...] = (
    "x86_64-unknown-linux-musl",
    "x86_64-unknown-linux-gnu",
    "x86_64-pc-windows-gnu",
    "arm-unknown-linux-gnueabihf",
    "aarch64-unknown-linux-gnu",
    "mips-unknown-linux-gnu",
    "mipsel-unknown-linux-gnu",
)


def resolve_targets(
    requested: Sequence[str] | None,
    defaults: Sequence[str] = DEFAULT_TARGETS,
) -> tuple[str, ...]:
    """Requested triples as given (empty strings and duplicates dropped, order kept), or defaults when none requested."""
    targets = unique_in_order(requested or ())
    if not targets:
        return tuple(defaults)
    return tuple(targets)


def detect_host_target() -> str:
    """Host triple from `rustc -vV`. Raises SystemExit if rustc is unavailable or prints no host line."""
    try:
        r = subprocess.run(
            ["rustc", "-vV"],
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as e:
        msg = "rustc not found on PATH; cannot detect host target"
        raise SystemExit(msg) from e
    if r.returncode != 0:
        msg = f"rustc -vV failed with exit code {r.returncode}"
        raise SystemExit(msg)
    for line in r.stdout.splitlines():
        if line.startswith("host: "):
            return line.removeprefix("host: ").strip()
    msg = "Failed to determine host target triple from `rustc -vV`"
    raise SystemExit(msg)
