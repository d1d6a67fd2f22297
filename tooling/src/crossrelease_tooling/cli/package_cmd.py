"""`crossrelease package` — build, archive, and checksum each target."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from crossrelease_tooling.build.targets import detect_host_target, resolve_targets
from crossrelease_tooling.config import resolve_settings
from crossrelease_tooling.release.pipeline import run as run_release

HOST_BUILD_TOOL = "cargo"


def _parser():
    import argparse

    ap = argparse.ArgumentParser(
        prog="crossrelease package",
        description="Build release binaries per target triple and package them with .sha256 sidecars",
    )
    ap.add_argument(
        "--target",
        "-t",
        action="append",
        default=[],
        dest="targets",
        help="Target triple (repeatable; default: release.yaml targets or built-in matrix)",
    )
    ap.add_argument(
        "--host",
        action="store_true",
        help="Build only the host triple (from rustc -vV) with cargo",
    )
    ap.add_argument(
        "--project-root",
        type=Path,
        default=Path.cwd(),
        help="Project root (default: cwd)",
    )
    ap.add_argument("--config", type=Path, default=None, help="Release config (default: release.yaml)")
    ap.add_argument("--manifest", default=None, help="Manifest with the version (default: Cargo.toml)")
    ap.add_argument("--output-dir", default=None, help="Archive output directory (default: release)")
    ap.add_argument("--project-name", default=None, help="Archive name prefix")
    ap.add_argument("--binary-name", default=None, help="Binary name (default: project name)")
    ap.add_argument("--tool", default=None, help="Build tool (default: cross; cargo with --host)")
    ap.add_argument(
        "--feature",
        action="append",
        default=None,
        dest="features",
        help="Extra cargo feature for every target (repeatable)",
    )
    ap.add_argument(
        "--no-compress",
        action="store_false",
        dest="compress",
        default=None,
        help="Do not run upx over binaries",
    )
    ap.add_argument("--timeout", type=float, default=None, help="Per-target build timeout (seconds)")
    ap.add_argument(
        "--keep-going",
        action="store_true",
        default=None,
        help="Continue with remaining targets after a build failure",
    )
    ap.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return ap


def run_package_argv(argv: list[str] | None = None) -> None:
    """Parse argv and run the release pipeline. argv defaults to sys.argv[2:]."""
    if argv is None:
        argv = sys.argv[2:] if len(sys.argv) > 2 else []
    args = _parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.host and args.targets:
        print("❌ --host and --target are mutually exclusive", file=sys.stderr)
        sys.exit(2)

    tool = args.tool
    if args.host and tool is None:
        tool = HOST_BUILD_TOOL

    try:
        settings = resolve_settings(
            args.project_root,
            config_path=args.config,
            overrides={
                "manifest": args.manifest,
                "output_dir": args.output_dir,
                "project_name": args.project_name,
                "binary_name": args.binary_name,
                "build_tool": tool,
                "features": args.features,
                "compress": args.compress,
                "build_timeout": args.timeout,
                "keep_going": args.keep_going,
            },
        )
        if args.host:
            targets = (detect_host_target(),)
        else:
            targets = resolve_targets(args.targets, settings.default_targets)
        rc = run_release(settings, targets)
    except SystemExit as e:
        if isinstance(e.code, str):
            print(f"❌ {e.code}", file=sys.stderr)
            sys.exit(1)
        raise
    sys.exit(rc)


def run_targets_argv(argv: list[str] | None = None) -> None:
    """Print the resolved target matrix, one triple per line."""
    import argparse

    if argv is None:
        argv = sys.argv[2:] if len(sys.argv) > 2 else []
    ap = argparse.ArgumentParser(prog="crossrelease targets", description="Show the resolved target matrix")
    ap.add_argument("--target", "-t", action="append", default=[], dest="targets")
    ap.add_argument("--project-root", type=Path, default=Path.cwd())
    ap.add_argument("--config", type=Path, default=None)
    args = ap.parse_args(argv)

    from crossrelease_tooling.config import DEFAULT_CONFIG_NAME, load_release_config

    config_path = args.config or args.project_root / DEFAULT_CONFIG_NAME
    try:
        data = load_release_config(config_path)
    except SystemExit as e:
        print(f"❌ {e.code}", file=sys.stderr)
        sys.exit(1)
    if data.get("targets"):
        targets = resolve_targets(args.targets, data["targets"])
    else:
        targets = resolve_targets(args.targets)
    for t in targets:
        print(t)
    sys.exit(0)


def run_version_argv(argv: list[str] | None = None) -> None:
    """Print the manifest version."""
    import argparse

    from crossrelease_tooling.helpers import read_manifest_version

    if argv is None:
        argv = sys.argv[2:] if len(sys.argv) > 2 else []
    ap = argparse.ArgumentParser(prog="crossrelease version", description="Print the manifest version")
    ap.add_argument(
        "--manifest",
        type=Path,
        default=Path("Cargo.toml"),
        help="Manifest with the version (default: Cargo.toml)",
    )
    args = ap.parse_args(argv)
    try:
        print(read_manifest_version(args.manifest))
    except SystemExit as e:
        print(f"❌ {e.code}", file=sys.stderr)
        sys.exit(1)
    sys.exit(0)


def run_verify_argv(argv: list[str] | None = None) -> None:
    """Verify .sha256 sidecars against their archives."""
    from crossrelease_tooling.package.checksum import run_verify

    if argv is None:
        argv = sys.argv[2:] if len(sys.argv) > 2 else []
    sys.exit(run_verify([Path(a) for a in argv]))
