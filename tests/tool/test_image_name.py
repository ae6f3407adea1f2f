"""Tests for the deploy-kit `image-name` command."""

import re

import pytest

from deploy_kit.exceptions import CommandException

from . import run_command

PROJECT = "tests/testdata/project/project.yaml"
SNAPSHOT_PROJECT = "tests/testdata/project/snapshot-project.yaml"


@pytest.mark.parametrize(
    ("args", "expected"),
    [
        (["%g/%a:%v", "--project", PROJECT], "sub/my-app:1.0.0\n"),
        (["${registry}/%g/%a:%l", "--project", PROJECT], "quay.io/sub/my-app:1.0.0\n"),
        (["%a:%l", "--project", SNAPSHOT_PROJECT], "my-app:latest\n"),
        (
            ["${registry}/%a", "--project", SNAPSHOT_PROJECT, "--missing", "blank"],
            "/my-app\n",
        ),
    ],
    ids=["release", "property", "snapshot-latest", "missing-blank"],
)
async def test_image_name(args: list[str], expected: str) -> None:
    """Test formatting image names."""
    result = await run_command(["image-name"] + args)
    assert result == expected


async def test_image_name_timestamp() -> None:
    """Test formatting a timestamped snapshot tag."""
    result = await run_command(["image-name", "%t", "--project", SNAPSHOT_PROJECT])
    assert re.fullmatch(r"snapshot-\d{6}-\d{6}-\d{4}\n", result)


async def test_image_name_unknown_token() -> None:
    """Test an unknown placeholder is reported as an error."""
    with pytest.raises(CommandException, match="deploy-kit error:.*No parameter '%x'"):
        await run_command(["image-name", "%x", "--project", PROJECT])
