"""Tests for the project library."""

from pathlib import Path

import pytest

from deploy_kit.exceptions import InputException, UnresolvedPropertyError
from deploy_kit.project import (
    MissingProperty,
    ProjectFacts,
    interpolate,
    is_snapshot_version,
    read_project,
)

TESTDATA_DIR = Path("tests/testdata/project")


@pytest.mark.parametrize(
    ("version", "expected"),
    [
        ("1.0-SNAPSHOT", True),
        ("1337-SNAPSHOT", True),
        ("1.0.0", False),
        ("1.0-snapshot", False),
        ("SNAPSHOT", False),
        (None, False),
    ],
)
def test_is_snapshot_version(version: str | None, expected: bool) -> None:
    """Test classifying snapshot versions."""
    assert is_snapshot_version(version) == expected


def test_interpolate() -> None:
    """Test replacing property references."""
    properties = {"a": "1", "b.c": "two"}
    assert interpolate("${a}-${b.c}", properties) == "1-two"
    assert interpolate("no references", properties) == "no references"
    assert interpolate("%a ${a}", properties) == "%a 1"


def test_interpolate_missing() -> None:
    """Test the policies for a reference without a value."""
    assert interpolate("x${missing}y", {}) == "x${missing}y"
    assert interpolate("x${missing}y", {}, MissingProperty.BLANK) == "xy"
    with pytest.raises(UnresolvedPropertyError, match="'missing'"):
        interpolate("x${missing}y", {}, MissingProperty.FAIL)


def test_interpolate_empty_value() -> None:
    """Test an empty property value is still a value."""
    assert interpolate("x${a}y", {"a": ""}, MissingProperty.FAIL) == "xy"


def test_project_snapshot() -> None:
    """Test the snapshot flag defaults to the version classification."""
    facts = ProjectFacts(group_id="g", artifact_id="a", version="1-SNAPSHOT")
    assert facts.is_snapshot
    facts = ProjectFacts(group_id="g", artifact_id="a", version="1")
    assert not facts.is_snapshot
    facts = ProjectFacts(group_id="g", artifact_id="a", version="1", snapshot=True)
    assert facts.is_snapshot


async def test_read_project() -> None:
    """Test reading the project from a yaml file."""
    facts = await read_project(TESTDATA_DIR / "project.yaml")
    assert facts.group_id == "com.example.sub"
    assert facts.artifact_id == "My-App"
    assert facts.version == "1.0.0"
    assert not facts.is_snapshot
    assert facts.properties == {
        "chart.name": "name-from-fragment",
        "registry": "quay.io",
    }


async def test_read_project_snapshot() -> None:
    """Test reading a project without properties."""
    facts = await read_project(TESTDATA_DIR / "snapshot-project.yaml")
    assert facts.is_snapshot
    assert facts.properties == {}


async def test_read_invalid_project(tmp_path: Path) -> None:
    """Test reading a project file missing required fields."""
    project_file = tmp_path / "project.yaml"
    project_file.write_text("groupId: com.example\n")
    with pytest.raises(InputException, match="Invalid project file"):
        await read_project(project_file)


async def test_read_empty_project(tmp_path: Path) -> None:
    """Test reading an empty project file."""
    project_file = tmp_path / "project.yaml"
    project_file.write_text("")
    with pytest.raises(InputException, match="is empty"):
        await read_project(project_file)
