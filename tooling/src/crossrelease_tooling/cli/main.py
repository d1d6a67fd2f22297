"""Main CLI entry point for crossrelease tooling."""

import sys

from crossrelease_tooling.cli import package_cmd


def _usage() -> None:
    print("Usage: crossrelease <command> [args...]", file=sys.stderr)
    print("Commands:", file=sys.stderr)
    print(
        "  package [--target T ...] [--host]  - Build, archive, and checksum each target",
        file=sys.stderr,
    )
    print("  targets [--target T ...]           - Show the resolved target matrix", file=sys.stderr)
    print("  version [--manifest F]             - Print the manifest version", file=sys.stderr)
    print("  verify <file.sha256> ...           - Verify checksum sidecars", file=sys.stderr)


def main() -> None:
    """Main CLI entry point."""
    if len(sys.argv) < 2:
        _usage()
        sys.exit(1)

    command = sys.argv[1]

    if command == "package":
        package_cmd.run_package_argv()
    elif command == "targets":
        package_cmd.run_targets_argv()
    elif command == "version":
        package_cmd.run_version_argv()
    elif command == "verify":
        package_cmd.run_verify_argv()
    elif command in ("-h", "--help", "help"):
        _usage()
        sys.exit(0)
    else:
        print(f"Error: Unknown command: {command}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
