"""Pytest configuration and fixtures."""

import pytest
from pathlib import Path

from modulemd.index.module_index import ModuleIndex
from modulemd.model import Dependencies, ModuleStreamV1, ModuleStreamV2, new_module_stream


@pytest.fixture
def fixtures_dir() -> Path:
    """Provide path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def reference_v1_text(fixtures_dir: Path) -> str:
    """Canonical text of the V1 reference document."""
    return (fixtures_dir / "reference.v1.yaml").read_text(encoding="utf-8")


@pytest.fixture
def reference_v2_text(fixtures_dir: Path) -> str:
    """Canonical text of the V2 reference document."""
    return (fixtures_dir / "reference.v2.yaml").read_text(encoding="utf-8")


@pytest.fixture
def minimal_v2() -> ModuleStreamV2:
    """Provide the smallest V2 stream that validates."""
    stream = new_module_stream(2, "foo", "bar")
    stream.summary = "summary"
    stream.description = "desc"
    stream.module_licenses.add("MIT")
    return stream


@pytest.fixture
def minimal_v1() -> ModuleStreamV1:
    """Provide the smallest V1 stream that validates."""
    stream = new_module_stream(1, "foo", "bar")
    stream.summary = "summary"
    stream.description = "desc"
    stream.module_licenses.add("MIT")
    return stream


@pytest.fixture
def platform_deps() -> Dependencies:
    """Provide a requirement set on platform:f30 at build and run time."""
    deps = Dependencies()
    deps.add_buildtime_stream("platform", "f30")
    deps.add_runtime_stream("platform", "f30")
    return deps


@pytest.fixture
def f29_index(fixtures_dir: Path) -> ModuleIndex:
    """Provide an index loaded strictly from f29.yaml."""
    index = ModuleIndex()
    failures = index.update_from_file(fixtures_dir / "f29.yaml", strict=True)
    assert failures == []
    return index


@pytest.fixture
def f29_updates_index(fixtures_dir: Path) -> ModuleIndex:
    """Provide an index loaded strictly from f29-updates.yaml."""
    index = ModuleIndex()
    failures = index.update_from_file(fixtures_dir / "f29-updates.yaml", strict=True)
    assert failures == []
    return index
