"""Tests for crossrelease_tooling.release.pipeline (per-target build -> package -> checksum)."""

import re
from pathlib import Path

import pytest

from crossrelease_tooling.config import ReleaseSettings
from crossrelease_tooling.package import read_checksum, verify_checksum
from crossrelease_tooling.release import Stage, run_pipeline, run_release


def _settings(root: Path, **kw) -> ReleaseSettings:
    base = {
        "project_root": root,
        "manifest": root / "Cargo.toml",
        "output_dir": root / "release",
        "project_name": "demo",
        "binary_name": "demo",
        "compress": False,
    }
    base.update(kw)
    return ReleaseSettings(**base)


class FakeBuilder:
    """Writes a fake binary per triple; returns the configured exit code."""

    def __init__(self, make_binary, failures: dict[str, int] | None = None) -> None:
        self.make_binary = make_binary
        self.failures = failures or {}
        self.calls: list[tuple] = []

    def __call__(self, project_root, triple, tool, features, timeout) -> int:
        self.calls.append((triple, tool, tuple(features), timeout))
        rc = self.failures.get(triple, 0)
        if rc == 0:
            self.make_binary(project_root, triple)
        return rc


class TestRunPipeline:
    def test_linux_scenario(self, cargo_project: Path, make_binary) -> None:
        builder = FakeBuilder(make_binary)
        result = run_pipeline(
            _settings(cargo_project), ["x86_64-unknown-linux-musl"], builder=builder
        )
        assert result.exit_code == 0
        assert result.version == "1.2.3"
        (o,) = result.outcomes
        assert o.ok
        assert o.archive == cargo_project / "release" / "demo1.2.3.x86_64-unknown-linux-musl.tar.xz"
        assert o.checksum is not None
        assert o.checksum.name == "demo1.2.3.x86_64-unknown-linux-musl.tar.xz.sha256"
        text = o.checksum.read_text()
        assert re.fullmatch(r"[0-9a-f]{64}  demo1\.2\.3\.x86_64-unknown-linux-musl\.tar\.xz\n", text)
        _, filename = read_checksum(o.checksum)
        assert filename == o.archive.name
        assert verify_checksum(o.checksum)

    def test_windows_scenario(self, tmp_path: Path, make_binary) -> None:
        (tmp_path / "Cargo.toml").write_text('[package]\nname = "demo"\nversion = "0.9.0"\n')
        result = run_pipeline(
            _settings(tmp_path), ["x86_64-pc-windows-gnu"], builder=FakeBuilder(make_binary)
        )
        (o,) = result.outcomes
        assert o.ok
        assert o.archive is not None
        assert o.archive.name == "demo0.9.0.x86_64-pc-windows-gnu.zip"

    def test_passes_settings_to_builder(self, cargo_project: Path, make_binary) -> None:
        builder = FakeBuilder(make_binary)
        run_pipeline(
            _settings(cargo_project, build_tool="cargo", features=("tls",), build_timeout=60.0),
            ["x86_64-unknown-linux-gnu"],
            builder=builder,
        )
        assert builder.calls == [("x86_64-unknown-linux-gnu", "cargo", ("tls",), 60.0)]

    def test_targets_processed_in_order(self, cargo_project: Path, make_binary) -> None:
        builder = FakeBuilder(make_binary)
        targets = ["aarch64-unknown-linux-gnu", "x86_64-pc-windows-gnu", "mipsel-unknown-linux-gnu"]
        result = run_pipeline(_settings(cargo_project), targets, builder=builder)
        assert [c[0] for c in builder.calls] == targets
        assert [o.triple for o in result.outcomes] == targets
        assert all(o.ok for o in result.outcomes)
        names = sorted(p.name for p in (cargo_project / "release").iterdir())
        assert len(names) == 6

    def test_missing_version_aborts_before_build(self, tmp_path: Path, make_binary) -> None:
        (tmp_path / "Cargo.toml").write_text('[package]\nname = "demo"\n')
        builder = FakeBuilder(make_binary)
        with pytest.raises(SystemExit):
            run_pipeline(_settings(tmp_path), ["x86_64-unknown-linux-musl"], builder=builder)
        assert builder.calls == []

    def test_build_failure_aborts_run_with_builder_exit_code(
        self, cargo_project: Path, make_binary
    ) -> None:
        builder = FakeBuilder(make_binary, failures={"x86_64-unknown-linux-gnu": 101})
        targets = ["x86_64-unknown-linux-musl", "x86_64-unknown-linux-gnu", "x86_64-pc-windows-gnu"]
        result = run_pipeline(_settings(cargo_project), targets, builder=builder)
        assert result.aborted
        assert [c[0] for c in builder.calls] == targets[:2]
        assert result.outcomes[0].ok
        assert result.outcomes[1].stage is Stage.BUILD
        assert result.exit_code == 101
        assert not (cargo_project / "release" / "demo1.2.3.x86_64-unknown-linux-gnu.tar.xz").exists()

    def test_keep_going_attempts_every_target(self, cargo_project: Path, make_binary) -> None:
        builder = FakeBuilder(make_binary, failures={"x86_64-unknown-linux-musl": 2})
        targets = ["x86_64-unknown-linux-musl", "x86_64-pc-windows-gnu"]
        result = run_pipeline(_settings(cargo_project, keep_going=True), targets, builder=builder)
        assert not result.aborted
        assert [o.ok for o in result.outcomes] == [False, True]
        assert result.exit_code == 2

    def test_unsupported_target_reported_and_siblings_continue(
        self, cargo_project: Path, make_binary, capsys
    ) -> None:
        builder = FakeBuilder(make_binary)
        targets = ["wasm32-unknown-unknown", "x86_64-unknown-linux-musl"]
        result = run_pipeline(_settings(cargo_project), targets, builder=builder)
        bad, good = result.outcomes
        assert bad.stage is Stage.PACKAGE
        assert bad.archive is None and bad.checksum is None
        assert good.ok
        assert result.exit_code == 1
        files = sorted(p.name for p in (cargo_project / "release").iterdir())
        assert files == [
            "demo1.2.3.x86_64-unknown-linux-musl.tar.xz",
            "demo1.2.3.x86_64-unknown-linux-musl.tar.xz.sha256",
        ]
        err = capsys.readouterr().err
        assert "wasm32-unknown-unknown [package]" in err

    def test_missing_binary_is_packaging_error(self, cargo_project: Path) -> None:
        result = run_pipeline(
            _settings(cargo_project),
            ["x86_64-unknown-linux-gnu"],
            builder=lambda *a: 0,
        )
        (o,) = result.outcomes
        assert o.stage is Stage.PACKAGE
        assert "Binary not found" in (o.error or "")
        assert result.exit_code == 1

    def test_checksum_failure_keeps_archive(
        self, cargo_project: Path, make_binary, monkeypatch
    ) -> None:
        def fail(archive: Path) -> Path:
            raise OSError("no space left on device")

        monkeypatch.setattr("crossrelease_tooling.release.pipeline.write_checksum", fail)
        result = run_pipeline(
            _settings(cargo_project), ["x86_64-unknown-linux-musl"], builder=FakeBuilder(make_binary)
        )
        (o,) = result.outcomes
        assert o.stage is Stage.CHECKSUM
        assert o.archive is not None and o.archive.exists()
        assert result.exit_code == 1


class TestRun:
    def test_returns_exit_code_and_prints_summary(
        self, cargo_project: Path, make_binary, capsys
    ) -> None:
        rc = run_release(
            _settings(cargo_project), ["x86_64-unknown-linux-musl"], builder=FakeBuilder(make_binary)
        )
        assert rc == 0
        out = capsys.readouterr().out
        assert "Release 1.2.3 packaged for 1 target(s)" in out
