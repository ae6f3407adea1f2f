"""Library for uploading packaged charts to a chart repository.

The `HelmUploader` shells out to `helm` for OCI registries and to `curl` for
HTTP based chart repositories. Credentials are passed to the commands over
stdin so they never show up in the process list or debug logs.
"""

from abc import ABC, abstractmethod
import logging
from pathlib import Path

from . import command
from .credentials import Auth
from .exceptions import UploadError
from .manifest import HelmRepoType, HelmRepository

__all__ = [
    "Uploader",
    "HelmUploader",
]

_LOGGER = logging.getLogger(__name__)


HELM_BIN = "helm"
CURL_BIN = "curl"
OCI_SCHEME = "oci://"

_CURL_FLAGS = ["--fail", "--silent", "--show-error", "--config", "-"]


class Uploader(ABC):
    """Transport that publishes a chart archive to a repository."""

    @abstractmethod
    async def upload_single(self, tarball: Path, repo: HelmRepository) -> None:
        """Upload the archive to the repository."""


def _curl_config(auth: Auth | None) -> bytes:
    """Return a curl config file with the user credentials."""
    if auth is None:
        return b""
    user = f"{auth.username}:{auth.password}"
    user = user.replace("\\", "\\\\").replace('"', '\\"')
    return f'user = "{user}"\n'.encode()


def _auth(repo: HelmRepository) -> Auth | None:
    if repo.username is None or repo.password is None:
        return None
    return Auth(username=repo.username, password=repo.password)


class HelmUploader(Uploader):
    """Uploads charts using the helm and curl command line tools."""

    def __init__(self, helm_bin: str = HELM_BIN, curl_bin: str = CURL_BIN) -> None:
        """Initialize HelmUploader."""
        self._helm_bin = helm_bin
        self._curl_bin = curl_bin

    async def upload_single(self, tarball: Path, repo: HelmRepository) -> None:
        """Upload the archive to the repository."""
        if not repo.url:
            raise UploadError(f"Repository {repo.name} has no url")
        _LOGGER.info("Uploading %s to %s", tarball.name, repo)
        auth = _auth(repo)
        if repo.type == HelmRepoType.OCI:
            await self._push_oci(tarball, repo.url, auth)
        elif repo.type == HelmRepoType.CHARTMUSEUM:
            await self._post(tarball, repo.url, auth)
        elif repo.type in (HelmRepoType.ARTIFACTORY, HelmRepoType.NEXUS):
            await self._put(tarball, f"{repo.url.rstrip('/')}/{tarball.name}", auth)
        else:
            raise UploadError(
                f"Repository {repo.name} has unsupported type {repo.type}"
            )

    async def _push_oci(self, tarball: Path, url: str, auth: Auth | None) -> None:
        registry = url.removeprefix(OCI_SCHEME)
        if auth is not None:
            await command.run(
                command.Command(
                    [
                        self._helm_bin,
                        "registry",
                        "login",
                        registry.split("/", 1)[0],
                        "--username",
                        auth.username,
                        "--password-stdin",
                    ],
                    exc=UploadError,
                ),
                stdin=auth.password.encode(),
            )
        await command.run(
            command.Command(
                [self._helm_bin, "push", str(tarball), f"{OCI_SCHEME}{registry}"],
                exc=UploadError,
            )
        )

    async def _post(self, tarball: Path, url: str, auth: Auth | None) -> None:
        await command.run(
            command.Command(
                [
                    self._curl_bin,
                    *_CURL_FLAGS,
                    "--request",
                    "POST",
                    "--data-binary",
                    f"@{tarball}",
                    url,
                ],
                exc=UploadError,
            ),
            stdin=_curl_config(auth),
        )

    async def _put(self, tarball: Path, url: str, auth: Auth | None) -> None:
        await command.run(
            command.Command(
                [self._curl_bin, *_CURL_FLAGS, "--upload-file", str(tarball), url],
                exc=UploadError,
            ),
            stdin=_curl_config(auth),
        )
