"""Target matrix resolution and per-target cross builds."""

from .cross_build import (
    DEFAULT_BUILD_TOOL,
    binary_path,
    build_command,
    features_for,
    run_build,
)
from .targets import DEFAULT_TARGETS, detect_host_target, resolve_targets

__all__ = [
    "DEFAULT_BUILD_TOOL",
    "DEFAULT_TARGETS",
    "binary_path",
    "build_command",
    "detect_host_target",
    "features_for",
    "resolve_targets",
    "run_build",
]
