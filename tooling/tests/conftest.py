"""Pytest fixtures for crossrelease tooling tests."""

from pathlib import Path

import pytest

CARGO_TOML = """[package]
name = "demo"
version = "1.2.3"
edition = "2021"

[dependencies]
serde = { version = "1", features = ["derive"] }
"""


@pytest.fixture
def cargo_project(tmp_path: Path) -> Path:
    """Temporary Cargo project root with a demo 1.2.3 manifest."""
    (tmp_path / "Cargo.toml").write_text(CARGO_TOML)
    return tmp_path


def make_binary(project_root: Path, triple: str, name: str = "demo") -> Path:
    """Write a fake release binary where cargo would put it for triple."""
    ext = ".exe" if "windows" in triple else ""
    p = project_root / "target" / triple / "release" / f"{name}{ext}"
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_bytes(b"\x7fELF fake binary for " + triple.encode())
    p.chmod(0o755)
    return p


@pytest.fixture(name="make_binary")
def make_binary_fixture():
    return make_binary
