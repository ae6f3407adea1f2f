"""Library for packaging and publishing Helm charts.

The chart sources are expected in `{outputDir}/{type}` for each configured
chart type, typically created with `create_chart_yaml` and the rendered
templates. This is an example that uploads a chart:
```python
from deploy_kit.helm import publish
from deploy_kit.manifest import read_helm_config, read_settings
from deploy_kit.upload import HelmUploader

config = await read_helm_config(Path("helm.yaml"))
settings = await read_settings(Path("settings.yaml"))
await publish(config, settings.servers, HelmUploader())
```

The snapshot repository is used for versions ending in `-SNAPSHOT` and the
stable repository for everything else.
"""

from collections.abc import Iterable
import dataclasses
import logging
from pathlib import Path
import tarfile

from .credentials import resolve_credentials
from .exceptions import InputException, NoRepositoryConfiguredError
from .manifest import HelmConfig, HelmRepository, ServerCredential
from .project import is_snapshot_version
from .upload import Uploader

__all__ = [
    "publish",
    "package_chart",
    "select_repository",
    "tarball_name",
]

_LOGGER = logging.getLogger(__name__)


# Maps the archive extension to the tarfile compression mode.
COMPRESSION_MODES = {
    "tar.gz": "w:gz",
    "tgz": "w:gz",
    "tar.bz2": "w:bz2",
    "tar": "w",
}


def select_repository(config: HelmConfig) -> HelmRepository:
    """Return the repository the chart version should be uploaded to."""
    if is_snapshot_version(config.version):
        repo = config.snapshot_repository
    else:
        repo = config.stable_repository
    if repo is None or not repo.is_valid:
        raise NoRepositoryConfiguredError(
            "No repository or invalid repository configured for upload"
        )
    _LOGGER.debug("Selected repository %s for version %s", repo, config.version)
    return repo


def tarball_name(chart: str, version: str, extension: str) -> str:
    """Return the file name of the packaged chart archive."""
    return f"{chart}-{version}.{extension}"


def package_chart(chart_dir: Path, tarball: Path, chart_name: str) -> Path:
    """Package the chart directory into an archive rooted at the chart name."""
    if not chart_dir.is_dir():
        raise InputException(
            f"Chart source directory {chart_dir} does not exist, the chart must "
            "be generated first"
        )
    mode = None
    for suffix, compression in COMPRESSION_MODES.items():
        if tarball.name.endswith(f".{suffix}"):
            mode = compression
            break
    if mode is None:
        raise InputException(f"Unsupported chart archive extension for {tarball.name}")
    tarball.parent.mkdir(parents=True, exist_ok=True)
    _LOGGER.debug("Packaging %s into %s", chart_dir, tarball)
    with tarfile.open(tarball, mode) as archive:  # type: ignore[call-overload]
        for path in sorted(chart_dir.rglob("*")):
            archive.add(
                path,
                arcname=str(Path(chart_name) / path.relative_to(chart_dir)),
                recursive=False,
            )
    return tarball


async def publish(
    config: HelmConfig,
    servers: Iterable[ServerCredential],
    uploader: Uploader,
) -> None:
    """Package and upload the chart for every configured chart type.

    The types are processed in order and the first failure aborts the rest.
    """
    if not config.chart or not config.version:
        raise InputException("Chart name and version are required to publish")
    repo = select_repository(config)
    auth = resolve_credentials(repo, servers)
    repo = dataclasses.replace(repo, username=auth.username, password=auth.password)
    if not config.output_dir or not config.tarball_output_dir:
        raise InputException("Both outputDir and tarballOutputDir must be configured")
    name = tarball_name(config.chart, config.version, config.chart_extension)
    for helm_type in config.types:
        chart_dir = Path(config.output_dir) / helm_type.output_dir
        tarball = Path(config.tarball_output_dir) / helm_type.output_dir / name
        package_chart(chart_dir, tarball, config.chart)
        _LOGGER.info("Uploading %s chart %s to %s", helm_type.value, name, repo)
        await uploader.upload_single(tarball, repo)
