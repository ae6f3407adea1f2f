"""Tests for manifest library."""

from pathlib import Path

import pytest
import yaml

from deploy_kit.exceptions import InputException
from deploy_kit.manifest import (
    Chart,
    HelmConfig,
    HelmDependency,
    HelmRepoType,
    HelmRepository,
    HelmType,
    Maintainer,
    read_helm_config,
    read_settings,
)

TESTDATA_DIR = Path("tests/testdata/project")


async def test_read_helm_config() -> None:
    """Test parsing a helm configuration file."""
    config = await read_helm_config(TESTDATA_DIR / "helm.yaml")
    assert config.chart == "Chart Name"
    assert config.version == "1337"
    assert config.api_version is None
    assert config.sources == ["https://source.example.com"]
    assert config.maintainers == [Maintainer(name="maintainer-from-config")]
    assert config.dependencies == [HelmDependency(name="dependency-from-config")]
    assert config.types == [HelmType.KUBERNETES, HelmType.OPENSHIFT]
    assert config.chart_extension == "tar.gz"
    assert config.stable_repository == HelmRepository(
        name="stable-repo",
        type=HelmRepoType.ARTIFACTORY,
        url="https://example.com/artifactory",
    )
    assert config.snapshot_repository is not None
    assert config.snapshot_repository.type == HelmRepoType.CHARTMUSEUM


def test_helm_config_defaults() -> None:
    """Test the defaults of a minimal helm configuration."""
    config = HelmConfig.from_dict({"chart": "chart", "version": "1"})
    assert config.types == [HelmType.KUBERNETES]
    assert config.chart_extension == "tar.gz"
    assert config.stable_repository is None
    assert config.snapshot_repository is None


def test_base_chart() -> None:
    """Test building the chart from the configuration."""
    config = HelmConfig(
        chart="Chart Name",
        version="1337",
        keywords=["ci"],
        dependencies=[
            HelmDependency(name="nginx", version="1.2.3.", repository="repository")
        ],
    )
    chart = config.base_chart()
    assert chart.api_version == "v1"
    assert chart.name == "Chart Name"
    assert chart.version == "1337"
    assert chart.keywords == ["ci"]
    assert chart.dependencies == [
        HelmDependency(name="nginx", version="1.2.3.", repository="repository")
    ]


def test_base_chart_api_version() -> None:
    """Test the api version may be configured."""
    config = HelmConfig(chart="chart", version="1", api_version="v2")
    assert config.base_chart().api_version == "v2"


def test_chart_yaml_field_order() -> None:
    """Test the chart is serialized in schema order with unset fields omitted."""
    chart = Chart(
        name="chart",
        version="1",
        keywords=["b", "a"],
        description="A chart",
        maintainers=[Maintainer(name="me", email="me@example.com")],
        home="https://example.com",
    )
    content = chart.yaml()
    assert content == (
        "apiVersion: v1\n"
        "name: chart\n"
        "version: '1'\n"
        "description: A chart\n"
        "home: https://example.com\n"
        "keywords:\n"
        "- b\n"
        "- a\n"
        "maintainers:\n"
        "- name: me\n"
        "  email: me@example.com\n"
    )
    assert yaml.safe_load(content)["apiVersion"] == "v1"


def test_repository_is_valid() -> None:
    """Test a repository needs a url and type to be valid."""
    assert HelmRepository(
        name="repo", type=HelmRepoType.NEXUS, url="https://example.com"
    ).is_valid
    assert not HelmRepository(name="repo", url="https://example.com").is_valid
    assert not HelmRepository(name="repo", type=HelmRepoType.NEXUS).is_valid
    assert not HelmRepository(name="repo").is_valid


def test_repository_str_hides_credentials() -> None:
    """Test the debug string of a repository does not contain the password."""
    repo = HelmRepository(
        name="repo",
        type=HelmRepoType.OCI,
        url="oci://example.com/charts",
        username="user",
        password="S3cret",
    )
    assert str(repo) == "repo (OCI: oci://example.com/charts)"


async def test_read_settings() -> None:
    """Test reading the server credentials."""
    settings = await read_settings(TESTDATA_DIR / "settings.yaml")
    assert [server.id for server in settings.servers] == ["stable-repo", "SNAP-REPO"]
    assert settings.servers[1].username == "U"
    assert settings.servers[1].password is None


async def test_read_invalid_helm_config(tmp_path: Path) -> None:
    """Test reading a helm configuration with an unknown chart type."""
    config_file = tmp_path / "helm.yaml"
    config_file.write_text("chart: chart\ntypes:\n  - windows\n")
    with pytest.raises(InputException, match="Invalid HelmConfig file"):
        await read_helm_config(config_file)
