"""Representation of a Helm chart and the configuration used to publish it.

The chart configuration is typically checked in next to the project and
combined with chart fragments on disk to produce the final `Chart.yaml`.
Repository credentials may be provided inline or through a separate settings
file with a list of servers.
"""

from dataclasses import dataclass, field
from enum import Enum
import logging
from pathlib import Path
from typing import Any, ClassVar, cast

import aiofiles
from mashumaro import DataClassDictMixin, field_options
from mashumaro.codecs.yaml import yaml_decode
from mashumaro.config import BaseConfig
from mashumaro.exceptions import InvalidFieldValue, MissingField
import yaml

from .exceptions import InputException

__all__ = [
    "read_helm_config",
    "read_settings",
    "Chart",
    "Maintainer",
    "HelmDependency",
    "HelmRepository",
    "HelmRepoType",
    "HelmType",
    "HelmConfig",
    "ServerCredential",
    "Settings",
]

_LOGGER = logging.getLogger(__name__)


CHART_API_VERSION = "v1"
CHART_FILENAME = "Chart.yaml"
DEFAULT_CHART_EXTENSION = "tar.gz"


@dataclass
class BaseManifest(DataClassDictMixin):
    """Base class for all manifest objects."""

    @classmethod
    def parse_yaml(cls, content: str) -> "BaseManifest":
        """Parse a serialized manifest."""
        return yaml_decode(content, cls)

    def yaml(self) -> str:
        """Return a YAML string representation in field declaration order."""
        return yaml.dump(self.to_dict(), sort_keys=False)

    class Config(BaseConfig):
        omit_none = True
        serialize_by_alias = True


@dataclass
class Maintainer(BaseManifest):
    """A maintainer of the chart."""

    name: str | None = None
    """The maintainer name."""

    email: str | None = None
    """The maintainer email."""


@dataclass
class HelmDependency(BaseManifest):
    """A chart that this chart depends on."""

    name: str | None = None
    """The name of the chart."""

    version: str | None = None
    """The version range of the chart."""

    repository: str | None = None
    """The repository URL of the chart."""


@dataclass
class Chart(BaseManifest):
    """The contents of a `Chart.yaml` chart descriptor.

    The field order is the order used when the chart is written to disk.
    """

    api_version: str | None = field(
        metadata=field_options(alias="apiVersion"), default=CHART_API_VERSION
    )
    """The chart API version."""

    name: str | None = None
    """The name of the chart."""

    version: str | None = None
    """The version of the chart."""

    description: str | None = None
    """A single sentence description of the chart."""

    home: str | None = None
    """The URL of the project home page."""

    icon: str | None = None
    """A URL to an icon for the chart."""

    engine: str | None = None
    """The template engine name."""

    sources: list[str] | None = None
    """URLs to the source code of the project."""

    keywords: list[str] | None = None
    """Keywords about the chart."""

    maintainers: list[Maintainer] | None = None
    """The chart maintainers."""

    dependencies: list[HelmDependency] | None = None
    """Charts this chart depends on."""


class HelmRepoType(str, Enum):
    """The kinds of repositories a chart may be uploaded to."""

    CHARTMUSEUM = "CHARTMUSEUM"
    ARTIFACTORY = "ARTIFACTORY"
    NEXUS = "NEXUS"
    OCI = "OCI"


@dataclass
class HelmRepository(BaseManifest):
    """A named remote destination for charts."""

    name: str
    """The name of the repository, matched against the server `id` for credentials."""

    type: HelmRepoType | None = None
    """The kind of repository which determines how charts are uploaded."""

    url: str | None = None
    """The URL of the repository."""

    username: str | None = None
    """Username used to authenticate with the repository."""

    password: str | None = None
    """Password used to authenticate with the repository."""

    @property
    def is_valid(self) -> bool:
        """Return True if the repository has enough detail to upload to."""
        return bool(self.url) and self.type is not None

    def __str__(self) -> str:
        """Render as a debug string without credentials."""
        return f"{self.name} ({self.type.value if self.type else None}: {self.url})"


class HelmType(str, Enum):
    """The platform flavors a chart is generated for."""

    KUBERNETES = "kubernetes"
    OPENSHIFT = "openshift"

    @property
    def output_dir(self) -> str:
        """The sub directory holding the chart for this type."""
        return self.value


@dataclass
class HelmConfig(BaseManifest):
    """Configuration for building and publishing a Helm chart."""

    CHART_FIELDS: ClassVar[tuple[str, ...]] = (
        "description",
        "home",
        "icon",
        "engine",
        "sources",
        "keywords",
        "maintainers",
        "dependencies",
    )

    chart: str | None = None
    """The name of the chart."""

    version: str | None = None
    """The version of the chart."""

    api_version: str | None = field(
        metadata=field_options(alias="apiVersion"), default=None
    )
    """The chart API version, the default is used when unset."""

    description: str | None = None
    home: str | None = None
    icon: str | None = None
    engine: str | None = None
    sources: list[str] | None = None
    keywords: list[str] | None = None
    maintainers: list[Maintainer] | None = None
    dependencies: list[HelmDependency] | None = None

    types: list[HelmType] = field(default_factory=lambda: [HelmType.KUBERNETES])
    """The platform flavors to generate and upload."""

    output_dir: str | None = field(
        metadata=field_options(alias="outputDir"), default=None
    )
    """The directory holding the generated chart sources, one per type."""

    tarball_output_dir: str | None = field(
        metadata=field_options(alias="tarballOutputDir"), default=None
    )
    """The directory that packaged chart archives are written to."""

    chart_extension: str = field(
        metadata=field_options(alias="chartExtension"),
        default=DEFAULT_CHART_EXTENSION,
    )
    """The file extension of the chart archive."""

    stable_repository: HelmRepository | None = field(
        metadata=field_options(alias="stableRepository"), default=None
    )
    """The repository used to publish released versions."""

    snapshot_repository: HelmRepository | None = field(
        metadata=field_options(alias="snapshotRepository"), default=None
    )
    """The repository used to publish snapshot versions."""

    def base_chart(self) -> Chart:
        """Return the chart descriptor described by this configuration."""
        chart = Chart(
            api_version=self.api_version or CHART_API_VERSION,
            name=self.chart,
            version=self.version,
        )
        for key in self.CHART_FIELDS:
            setattr(chart, key, getattr(self, key))
        return chart


@dataclass
class ServerCredential(BaseManifest):
    """An out of band credential entry for a repository."""

    id: str
    """The identifier matched against the repository name."""

    username: str | None = None
    """The username for the server."""

    password: str | None = None
    """The password for the server."""


@dataclass
class Settings(BaseManifest):
    """Settings holding credentials for remote servers."""

    servers: list[ServerCredential] = field(default_factory=list)
    """The list of server credentials."""


async def _read_file(path: Path, cls: type[BaseManifest]) -> Any:
    """Decode the yaml contents of the file as the specified manifest type."""
    async with aiofiles.open(str(path)) as input_file:
        content = await input_file.read()
    if not content:
        raise InputException(f"Validation error for {cls.__name__} file {path}")
    try:
        return cls.parse_yaml(content)
    except (
        yaml.YAMLError,
        MissingField,
        InvalidFieldValue,
        TypeError,
        ValueError,
    ) as err:
        raise InputException(f"Invalid {cls.__name__} file {path}: {err}") from err


async def read_helm_config(config_path: Path) -> HelmConfig:
    """Return the contents of a serialized helm configuration file."""
    return cast(HelmConfig, await _read_file(config_path, HelmConfig))


async def read_settings(settings_path: Path) -> Settings:
    """Return the contents of a settings file with server credentials."""
    settings = cast(Settings, await _read_file(settings_path, Settings))
    _LOGGER.debug("Loaded %d servers from %s", len(settings.servers), settings_path)
    return settings
