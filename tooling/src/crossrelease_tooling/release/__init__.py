"""Release: build, package, and checksum every target in the matrix."""

from .pipeline import ReleaseResult, Stage, TargetOutcome, run_pipeline
from .pipeline import run as run_release

__all__ = ["ReleaseResult", "Stage", "TargetOutcome", "run_pipeline", "run_release"]
