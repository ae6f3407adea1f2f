"""Facts about the project being built and property interpolation.

The project facts are the source of truth for computing image names and
tags. They are read once per invocation and are never mutated afterwards.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
import logging
from pathlib import Path
import re
from typing import cast

import aiofiles
from mashumaro import DataClassDictMixin, field_options
from mashumaro.codecs.yaml import yaml_decode
from mashumaro.config import BaseConfig
from mashumaro.exceptions import InvalidFieldValue, MissingField
import yaml

from .exceptions import InputException, UnresolvedPropertyError

__all__ = [
    "ProjectFacts",
    "MissingProperty",
    "is_snapshot_version",
    "interpolate",
    "read_project",
]

_LOGGER = logging.getLogger(__name__)


SNAPSHOT_SUFFIX = "-SNAPSHOT"

# Matches `${name}` style references, the name may not contain a closing brace.
PROPERTY_PATTERN = re.compile(r"\$\{([^}]+)\}")


class MissingProperty(str, Enum):
    """Policy applied to a `${name}` reference that has no value."""

    KEEP = "keep"
    """Leave the reference as literal text."""

    BLANK = "blank"
    """Replace the reference with an empty string."""

    FAIL = "fail"
    """Raise an UnresolvedPropertyError."""


def is_snapshot_version(version: str | None) -> bool:
    """Return True if the version is a pre-release snapshot version."""
    return version is not None and version.endswith(SNAPSHOT_SUFFIX)


@dataclass(frozen=True)
class ProjectFacts(DataClassDictMixin):
    """Immutable snapshot of the project model."""

    group_id: str = field(metadata=field_options(alias="groupId"))
    """The group identifier e.g. `com.example`."""

    artifact_id: str = field(metadata=field_options(alias="artifactId"))
    """The artifact identifier, typically the application name."""

    version: str
    """The raw project version."""

    snapshot: bool | None = field(
        metadata=field_options(alias="isSnapshot"), default=None
    )
    """Explicit snapshot classification, derived from the version when unset."""

    properties: dict[str, str] = field(default_factory=dict)
    """Build properties used for interpolation and overrides."""

    @property
    def is_snapshot(self) -> bool:
        """Return True if this is a snapshot build."""
        if self.snapshot is not None:
            return self.snapshot
        return is_snapshot_version(self.version)

    class Config(BaseConfig):
        omit_none = True
        serialize_by_alias = True


def interpolate(
    text: str,
    properties: Mapping[str, str],
    missing: MissingProperty = MissingProperty.KEEP,
) -> str:
    """Replace `${name}` references in the text with property values."""

    def replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if (value := properties.get(name)) is not None:
            return str(value)
        if missing == MissingProperty.FAIL:
            raise UnresolvedPropertyError(name)
        if missing == MissingProperty.BLANK:
            return ""
        return match.group(0)

    return PROPERTY_PATTERN.sub(replace, text)


async def read_project(project_path: Path) -> ProjectFacts:
    """Return the project facts stored in a yaml file."""
    async with aiofiles.open(str(project_path)) as project_file:
        content = await project_file.read()
    if not content:
        raise InputException(f"Project file {project_path} is empty")
    try:
        facts = yaml_decode(content, ProjectFacts)
    except (
        yaml.YAMLError,
        MissingField,
        InvalidFieldValue,
        TypeError,
        ValueError,
    ) as err:
        raise InputException(f"Invalid project file {project_path}: {err}") from err
    _LOGGER.debug("Loaded project %s:%s", facts.group_id, facts.artifact_id)
    return cast(ProjectFacts, facts)
