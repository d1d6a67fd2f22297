"""Build, package, and checksum each target in order.

Version is read once up front; a missing version aborts before any build.
A failed build stops the run with the build tool's exit status unless
keep_going is set, in which case it is recorded and the next target runs.
Packaging and checksum failures are recorded per target and never stop
later targets, but make the overall exit non-zero.
"""

from __future__ import annotations

import lzma
import sys
import tarfile
import zipfile
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from crossrelease_tooling.build.cross_build import binary_path, run_build
from crossrelease_tooling.config import ReleaseSettings
from crossrelease_tooling.helpers import read_manifest_version
from crossrelease_tooling.package.archive import package_binary
from crossrelease_tooling.package.checksum import write_checksum

_PACKAGE_ERRORS = (OSError, ValueError, tarfile.TarError, zipfile.BadZipFile, lzma.LZMAError)

Builder = Callable[..., int]


class Stage(Enum):
    BUILD = "build"
    PACKAGE = "package"
    CHECKSUM = "checksum"
    DONE = "done"


@dataclass
class TargetOutcome:
    """Where one target got to. stage is the failing stage, or DONE."""

    triple: str
    stage: Stage
    exit_code: int = 0
    archive: Path | None = None
    checksum: Path | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.stage is Stage.DONE


@dataclass
class ReleaseResult:
    version: str
    outcomes: list[TargetOutcome] = field(default_factory=list)
    aborted: bool = False

    @property
    def failed(self) -> list[TargetOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def exit_code(self) -> int:
        """0 if all ok; first failed build's status if any build failed; else 1."""
        failed = self.failed
        if not failed:
            return 0
        for o in failed:
            if o.stage is Stage.BUILD:
                return o.exit_code or 1
        return 1


def _package_target(
    settings: ReleaseSettings,
    triple: str,
    version: str,
) -> TargetOutcome:
    binary = binary_path(settings.project_root, triple, settings.binary_name)
    try:
        archive = package_binary(
            triple,
            version,
            binary,
            settings.output_dir,
            settings.project_name,
            compress=settings.compress,
        )
    except _PACKAGE_ERRORS as e:
        print(f"❌ {triple} [package]: {e}", file=sys.stderr)
        return TargetOutcome(triple, Stage.PACKAGE, exit_code=1, error=str(e))

    try:
        sidecar = write_checksum(archive)
    except OSError as e:
        print(f"❌ {triple} [checksum]: {e}", file=sys.stderr)
        return TargetOutcome(triple, Stage.CHECKSUM, exit_code=1, archive=archive, error=str(e))

    return TargetOutcome(triple, Stage.DONE, archive=archive, checksum=sidecar)


def run_pipeline(
    settings: ReleaseSettings,
    targets: Sequence[str],
    builder: Builder = run_build,
) -> ReleaseResult:
    """Run build -> package -> checksum for each target in order. Raises SystemExit on a bad manifest."""
    version = read_manifest_version(settings.manifest)
    print(f"🚀 Releasing {settings.project_name} {version} for {len(targets)} target(s)")
    result = ReleaseResult(version=version)

    for triple in targets:
        rc = builder(
            settings.project_root,
            triple,
            settings.build_tool,
            settings.features,
            settings.build_timeout,
        )
        if rc != 0:
            result.outcomes.append(
                TargetOutcome(triple, Stage.BUILD, exit_code=rc, error=f"build exited with {rc}")
            )
            if not settings.keep_going:
                print(f"❌ Aborting release: build failed for {triple}", file=sys.stderr)
                result.aborted = True
                break
            continue
        result.outcomes.append(_package_target(settings, triple, version))

    return result


def print_summary(result: ReleaseResult) -> None:
    for o in result.outcomes:
        if o.ok:
            print(f"✅ {o.triple}: {o.archive.name if o.archive else ''}")
        else:
            print(f"❌ {o.triple}: failed at {o.stage.value} ({o.error})", file=sys.stderr)
    if result.failed:
        print(
            f"❌ {len(result.failed)} of {len(result.outcomes)} target(s) failed",
            file=sys.stderr,
        )
    else:
        print(f"🎉 Release {result.version} packaged for {len(result.outcomes)} target(s)")


def run(settings: ReleaseSettings, targets: Sequence[str], builder: Builder = run_build) -> int:
    """Run the pipeline, print a summary, return the process exit code."""
    result = run_pipeline(settings, targets, builder=builder)
    print_summary(result)
    return result.exit_code
