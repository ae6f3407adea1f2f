"""Tests for the deploy-kit `chart` command."""

from pathlib import Path

import pytest
import yaml

from deploy_kit.exceptions import CommandException

from . import run_command

TESTDATA_DIR = Path("tests/testdata")
PROJECT = str(TESTDATA_DIR / "project/project.yaml")


@pytest.fixture(name="helm_config")
def helm_config_fixture(tmp_path: Path) -> Path:
    """Fixture for a helm configuration writing to a temporary directory."""
    config = yaml.safe_load((TESTDATA_DIR / "project/helm.yaml").read_text())
    config["outputDir"] = str(tmp_path / "target")
    config_path = tmp_path / "helm.yaml"
    config_path.write_text(yaml.dump(config, sort_keys=False))
    return config_path


async def test_chart(helm_config: Path, tmp_path: Path) -> None:
    """Test generating the chart for each chart type."""
    result = await run_command(
        [
            "chart",
            "--project",
            PROJECT,
            "--helm-config",
            str(helm_config),
            "--fragments",
            str(TESTDATA_DIR / "valid-helm-fragments"),
        ]
    )
    assert "kubernetes: name-from-fragment-version-from-fragment" in result
    assert "openshift: name-from-fragment-version-from-fragment" in result
    for helm_type in ("kubernetes", "openshift"):
        chart = yaml.safe_load(
            (tmp_path / "target" / helm_type / "Chart.yaml").read_text()
        )
        assert chart["apiVersion"] == "v1"
        assert chart["name"] == "name-from-fragment"
        assert chart["keywords"] == ["fragment"]
        assert chart["description"] == "Description from helmconfig"


async def test_chart_invalid_fragment(helm_config: Path, tmp_path: Path) -> None:
    """Test an invalid fragment fails without writing the chart."""
    with pytest.raises(CommandException, match="Failure in parsing Helm Chart fragment"):
        await run_command(
            [
                "chart",
                "--project",
                PROJECT,
                "--helm-config",
                str(helm_config),
                "--fragments",
                str(TESTDATA_DIR / "invalid-helm-fragments"),
            ]
        )
    assert not (tmp_path / "target").exists()
