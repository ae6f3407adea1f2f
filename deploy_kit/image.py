"""Helper functions for computing container image names.

An image name template may contain `${property}` references that are
resolved against the project properties, followed by `%x` placeholders
that are resolved against the project facts:

  - `%g` the user part of the image, derived from the group id
  - `%a` the artifact id
  - `%v` the project version
  - `%t` a timestamped tag for snapshot builds, the version otherwise
  - `%l` `latest` for snapshot builds, the version otherwise

For example, `%g/%a:%v` with a group id of `com.example.sub`, an artifact id
`My-App` and version `1.0.0` is formatted as `sub/my-app:1.0.0`.
"""

from collections.abc import Callable
import datetime
from enum import Enum
import functools
import logging
import re
import string

from .exceptions import UnknownFormatTokenError
from .project import MissingProperty, ProjectFacts, interpolate

__all__ = [
    "ImageNameFormatter",
    "sanitize_name",
    "format_snapshot_timestamp",
]

_LOGGER = logging.getLogger(__name__)


# Property that overrides the user computed from the group id.
IMAGE_USER_PROPERTY = "image.user"

# Property that overrides the tag computed from the project version.
IMAGE_TAG_PROPERTY = "image.tag"

SNAPSHOT_PREFIX = "snapshot-"
LATEST_TAG = "latest"

# A `%` followed by an optional printf style width qualifier and a single letter.
TOKEN_PATTERN = re.compile(r"%(-?[0-9]*(?:\.[0-9]+)?)([a-zA-Z])")

_NAME_CHARS = frozenset(string.ascii_letters + string.digits + "-")


def sanitize_name(name: str) -> str:
    """Return a lowercase name that is safe to use in an image registry.

    At most two underscores may appear in a row, dots are never repeated and
    all characters other than letters, digits and `-` are dropped.
    """
    result: list[str] = []
    underscores = 0
    last_was_dot = False
    for char in name:
        if char == "_":
            underscores += 1
            if underscores <= 2:
                result.append(char)
            continue
        if char == ".":
            if not last_was_dot:
                result.append(char)
                last_was_dot = True
                underscores = 0
            continue
        # Dropped characters do not break up a run of dots or underscores
        if char in _NAME_CHARS:
            underscores = 0
            last_was_dot = False
            result.append(char)
    return "".join(result).lower()


def format_snapshot_timestamp(now: datetime.datetime) -> str:
    """Format the time as `yyMMdd-HHmmss-SSSS` using zero padded milliseconds."""
    return f"{now:%y%m%d-%H%M%S}-{now.microsecond // 1000:04d}"


class TagMode(Enum):
    """How a tag is computed for snapshot builds."""

    PLAIN = "plain"
    SNAPSHOT_WITH_TIMESTAMP = "timestamp"
    SNAPSHOT_LATEST = "latest"


def _lookup_user(facts: ProjectFacts, now: datetime.datetime) -> str:
    """Return the image user, by default the last segment of the group id."""
    if (user := facts.properties.get(IMAGE_USER_PROPERTY)) is not None:
        return user
    group_id = facts.group_id.rstrip(".")
    return sanitize_name(group_id[group_id.rfind(".") + 1 :])


def _lookup_name(facts: ProjectFacts, now: datetime.datetime) -> str:
    """Return the image name from the artifact id."""
    return sanitize_name(facts.artifact_id)


def _lookup_tag(facts: ProjectFacts, now: datetime.datetime, mode: TagMode) -> str:
    """Return the image tag which only varies by mode for snapshot builds."""
    if tag := facts.properties.get(IMAGE_TAG_PROPERTY):
        return tag
    if facts.is_snapshot:
        if mode == TagMode.SNAPSHOT_WITH_TIMESTAMP:
            return SNAPSHOT_PREFIX + format_snapshot_timestamp(now)
        if mode == TagMode.SNAPSHOT_LATEST:
            return LATEST_TAG
    return facts.version


Lookup = Callable[[ProjectFacts, datetime.datetime], str]

LOOKUPS: dict[str, Lookup] = {
    "g": _lookup_user,
    "a": _lookup_name,
    "v": functools.partial(_lookup_tag, mode=TagMode.PLAIN),
    "t": functools.partial(_lookup_tag, mode=TagMode.SNAPSHOT_WITH_TIMESTAMP),
    "l": functools.partial(_lookup_tag, mode=TagMode.SNAPSHOT_LATEST),
}


class ImageNameFormatter:
    """Replace placeholders in an image name with facts about the project."""

    def __init__(
        self,
        facts: ProjectFacts,
        now: datetime.datetime,
        missing: MissingProperty = MissingProperty.KEEP,
    ) -> None:
        """Initialize ImageNameFormatter."""
        self._facts = facts
        self._now = now
        self._missing = missing

    def _replace(self, match: re.Match[str]) -> str:
        qualifier, token = match.groups()
        if (lookup := LOOKUPS.get(token)) is None:
            raise UnknownFormatTokenError(token)
        return f"%{qualifier}s" % lookup(self._facts, self._now)

    def format(self, name: str | None) -> str | None:
        """Return the formatted image name, or None when there is no name."""
        if name is None:
            return None
        name = interpolate(name, self._facts.properties, self._missing)
        result = TOKEN_PATTERN.sub(self._replace, name)
        _LOGGER.debug("Formatted image name '%s' as '%s'", name, result)
        return result
