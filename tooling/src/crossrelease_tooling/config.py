"""Release config loading.

Release config YAML format (release.yaml in the project root, all keys optional):
- project_name: archive name prefix (default: [package].name from the manifest)
- binary_name: binary under target/{triple}/release (default: project_name)
- manifest: manifest path holding the version (default: Cargo.toml)
- output_dir: where archives and sidecars are written (default: release)
- targets: list of triples used when no --target is given (default: built-in matrix)
- build_tool: cross-compiling build command (default: cross)
- features: extra cargo features enabled for every target
- compress: run upx over binaries before archiving when available (default: true)
- build_timeout: seconds before a build is abandoned (default: no limit)
- keep_going: after a failed build, continue with the remaining targets (default: false)

Environment: CROSSRELEASE_BUILD_TOOL and CROSSRELEASE_OUTPUT_DIR override the
file; explicit CLI values override both.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from crossrelease_tooling.build.cross_build import DEFAULT_BUILD_TOOL
from crossrelease_tooling.build.targets import DEFAULT_TARGETS
from crossrelease_tooling.helpers import read_manifest_name

DEFAULT_CONFIG_NAME = "release.yaml"

_LIST_KEYS = ("targets", "features")
_STR_KEYS = ("project_name", "binary_name", "manifest", "output_dir", "build_tool")
_BOOL_KEYS = ("compress", "keep_going")


@dataclass(frozen=True)
class ReleaseSettings:
    project_root: Path
    manifest: Path
    output_dir: Path
    project_name: str
    binary_name: str
    default_targets: tuple[str, ...] = DEFAULT_TARGETS
    build_tool: str = DEFAULT_BUILD_TOOL
    features: tuple[str, ...] = ()
    compress: bool = True
    build_timeout: float | None = None
    keep_going: bool = False


def load_release_config(config_path: Path) -> dict[str, Any]:
    """Load release config YAML. Missing file -> {}. Raises SystemExit on malformed content."""
    import yaml

    if not config_path.is_file():
        return {}
    try:
        with config_path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        msg = f"Invalid YAML in {config_path}: {e}"
        raise SystemExit(msg) from e
    if not isinstance(data, dict):
        msg = f"{config_path}: expected a mapping at top level"
        raise SystemExit(msg)

    for key in _LIST_KEYS:
        val = data.get(key)
        if val is not None and not (
            isinstance(val, list) and all(isinstance(v, str) for v in val)
        ):
            msg = f"{config_path}: {key} must be a list of strings"
            raise SystemExit(msg)
    for key in _STR_KEYS:
        val = data.get(key)
        if val is not None and not isinstance(val, str):
            msg = f"{config_path}: {key} must be a string"
            raise SystemExit(msg)
    for key in _BOOL_KEYS:
        val = data.get(key)
        if val is not None and not isinstance(val, bool):
            msg = f"{config_path}: {key} must be true or false"
            raise SystemExit(msg)
    timeout = data.get("build_timeout")
    if timeout is not None and (isinstance(timeout, bool) or not isinstance(timeout, (int, float))):
        msg = f"{config_path}: build_timeout must be a number of seconds"
        raise SystemExit(msg)
    return data


def _resolve_path(base: Path, value: str | Path) -> Path:
    p = Path(value)
    return p if p.is_absolute() else (base / p).resolve()


def resolve_settings(
    project_root: Path,
    config_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> ReleaseSettings:
    """Merge config file, environment, and overrides (None values ignored) into ReleaseSettings."""
    root = project_root.resolve()
    data = load_release_config(config_path or root / DEFAULT_CONFIG_NAME)

    env = {
        "build_tool": os.environ.get("CROSSRELEASE_BUILD_TOOL"),
        "output_dir": os.environ.get("CROSSRELEASE_OUTPUT_DIR"),
    }
    merged: dict[str, Any] = dict(data)
    for source in (env, overrides or {}):
        merged.update({k: v for k, v in source.items() if v is not None})

    manifest = _resolve_path(root, merged.get("manifest") or "Cargo.toml")
    project_name = merged.get("project_name") or read_manifest_name(manifest)
    if not project_name:
        msg = f"No project name: set project_name in config, pass --project-name, or add [package].name to {manifest}"
        raise SystemExit(msg)

    return ReleaseSettings(
        project_root=root,
        manifest=manifest,
        output_dir=_resolve_path(root, merged.get("output_dir") or "release"),
        project_name=project_name,
        binary_name=merged.get("binary_name") or project_name,
        default_targets=tuple(merged.get("targets") or DEFAULT_TARGETS),
        build_tool=merged.get("build_tool") or DEFAULT_BUILD_TOOL,
        features=tuple(merged.get("features") or ()),
        compress=bool(merged.get("compress", True)),
        build_timeout=merged.get("build_timeout"),
        keep_going=bool(merged.get("keep_going", False)),
    )
