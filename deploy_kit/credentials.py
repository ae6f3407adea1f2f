"""Module for resolving repository credentials."""

from collections.abc import Iterable
from dataclasses import dataclass
import logging

from .exceptions import (
    DuplicateCredentialsError,
    MissingPasswordError,
    MissingUsernameError,
    NoCredentialsFoundError,
)
from .manifest import HelmRepository, ServerCredential

__all__ = [
    "Auth",
    "resolve_credentials",
]

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Auth:
    """Authentication credentials."""

    username: str
    password: str

    def __repr__(self) -> str:
        return f"Auth(username={self.username!r}, password='***')"


def _index_servers(
    servers: Iterable[ServerCredential],
) -> tuple[dict[str, ServerCredential], set[str]]:
    """Return the servers keyed by id and the set of ids seen more than once."""
    index: dict[str, ServerCredential] = {}
    duplicates: set[str] = set()
    for server in servers:
        if server.id in index:
            duplicates.add(server.id)
        index[server.id] = server
    return index, duplicates


def resolve_credentials(
    repo: HelmRepository, servers: Iterable[ServerCredential]
) -> Auth:
    """Return the username and password to use for the repository.

    Credentials set on the repository itself always win. Any that are missing
    are looked up in the server list by matching the server `id` against the
    repository name.
    """
    if repo.username is not None and repo.password is not None:
        return Auth(username=repo.username, password=repo.password)

    index, duplicates = _index_servers(servers)
    if repo.name in duplicates:
        raise DuplicateCredentialsError(
            repo.name,
            f"Repo {repo.name} was found more than once in server list.",
        )
    if (server := index.get(repo.name)) is None:
        raise NoCredentialsFoundError(
            repo.name,
            f"No credentials found for {repo.name} in configuration or settings "
            "server list.",
        )
    _LOGGER.debug("Using credentials from server list for repo %s", repo.name)

    username = repo.username if repo.username is not None else server.username
    password = repo.password if repo.password is not None else server.password
    if username is None:
        raise MissingUsernameError(
            repo.name,
            f"Repo {repo.name} was found in server list but has no username/password.",
        )
    if password is None:
        raise MissingPasswordError(
            repo.name,
            f"Repo {repo.name} has a username but no password defined.",
        )
    return Auth(username=username, password=password)
