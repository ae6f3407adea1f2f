"""Library for assembling the `Chart.yaml` descriptor of a Helm chart.

The descriptor is built from the `HelmConfig` and may be overridden by a
chart fragment file found in one of the fragment directories, for example
`src/main/helm/Chart.helm.yaml`:

```yaml
name: ${chart.name}
keywords:
  - database
```

Fragments are interpolated with the project properties before they are
parsed. Every field present in the fragment replaces the configured value
entirely, lists included.
"""

from collections.abc import Iterable, Mapping
import json
import logging
from pathlib import Path
import re
from typing import Any

import aiofiles
import aiofiles.os
from aiofiles.ospath import exists
from mashumaro.exceptions import InvalidFieldValue, MissingField
import yaml

from .exceptions import FragmentParseError, MissingRequiredFieldError
from .manifest import CHART_FILENAME, Chart, HelmConfig
from .project import interpolate

__all__ = [
    "assemble",
    "create_chart_yaml",
    "find_fragment",
    "read_fragment",
    "write_chart",
]

_LOGGER = logging.getLogger(__name__)


FRAGMENT_PATTERN = re.compile(r"^chart\.helm\.(yaml|yml|json)$", re.IGNORECASE)

# Fields that must have a value in the final chart.
REQUIRED_FIELDS = ("name", "version")


def _chart_keys() -> list[str]:
    """Return the serialized field names of a chart in declaration order."""
    keys = []
    for name, dataclass_field in Chart.__dataclass_fields__.items():
        options = dataclass_field.metadata or {}
        keys.append(options.get("alias") or name)
    return keys


CHART_KEYS = _chart_keys()


def find_fragment(search_paths: Iterable[Path]) -> Path | None:
    """Return the first chart fragment file found in the search paths."""
    for search_path in search_paths:
        if not search_path.is_dir():
            _LOGGER.debug("Skipping missing fragment directory %s", search_path)
            continue
        candidates = sorted(
            path
            for path in search_path.iterdir()
            if path.is_file() and FRAGMENT_PATTERN.match(path.name)
        )
        if not candidates:
            continue
        if len(candidates) > 1:
            _LOGGER.warning(
                "Found multiple chart fragments in %s, using %s",
                search_path,
                candidates[0],
            )
        _LOGGER.debug("Found chart fragment %s", candidates[0])
        return candidates[0]
    return None


async def read_fragment(
    fragment_path: Path, properties: Mapping[str, str] | None = None
) -> dict[str, Any]:
    """Read and parse the chart fragment file.

    The fragment exists so any failure to read or parse it is an error.
    """
    try:
        async with aiofiles.open(
            str(fragment_path), encoding="utf-8"
        ) as fragment_file:
            content = await fragment_file.read()
    except (OSError, UnicodeDecodeError) as err:
        raise FragmentParseError(str(fragment_path), str(err)) from err
    content = interpolate(content, properties or {})
    try:
        if fragment_path.suffix.lower() == ".json":
            doc = json.loads(content)
        else:
            doc = yaml.safe_load(content)
    except (json.JSONDecodeError, yaml.YAMLError) as err:
        raise FragmentParseError(str(fragment_path), str(err)) from err
    if doc is None:
        return {}
    if not isinstance(doc, dict):
        raise FragmentParseError(
            str(fragment_path),
            f"expected a mapping but got {type(doc).__name__}",
        )
    return doc


def _merge(
    base: dict[str, Any], fragment: dict[str, Any], fragment_path: Path
) -> dict[str, Any]:
    """Replace each field of the base that is present in the fragment."""
    merged = dict(base)
    for key, value in fragment.items():
        if key not in CHART_KEYS:
            _LOGGER.warning(
                "Ignoring unsupported field '%s' in chart fragment %s",
                key,
                fragment_path,
            )
            continue
        if value is None:
            continue
        merged[key] = value
    return merged


async def assemble(
    config: HelmConfig,
    search_paths: Iterable[Path],
    properties: Mapping[str, str] | None = None,
) -> Chart:
    """Return the chart from the configuration merged with any chart fragment."""
    chart = config.base_chart()
    if (fragment_path := find_fragment(search_paths)) is not None:
        fragment = await read_fragment(fragment_path, properties)
        merged = _merge(chart.to_dict(), fragment, fragment_path)
        try:
            chart = Chart.from_dict(merged)
        except (MissingField, InvalidFieldValue, TypeError, ValueError) as err:
            raise FragmentParseError(str(fragment_path), str(err)) from err
    for key in REQUIRED_FIELDS:
        if not getattr(chart, key):
            raise MissingRequiredFieldError(
                f"Chart is missing required field '{key}'"
                + (f" (fragment {fragment_path})" if fragment_path else "")
            )
    return chart


async def write_chart(chart: Chart, output_dir: Path) -> Path:
    """Write the chart to `Chart.yaml` in the output directory.

    The file is replaced atomically so readers never observe a partial chart.
    """
    await aiofiles.os.makedirs(output_dir, exist_ok=True)
    chart_path = output_dir / CHART_FILENAME
    content = chart.yaml()
    temp_path = output_dir / f".{CHART_FILENAME}.tmp"
    try:
        async with aiofiles.open(temp_path, mode="w") as chart_file:
            await chart_file.write(content)
        await aiofiles.os.replace(temp_path, chart_path)
    except OSError:
        if await exists(temp_path):
            await aiofiles.os.remove(temp_path)
        raise
    _LOGGER.debug("Wrote chart %s-%s to %s", chart.name, chart.version, chart_path)
    return chart_path


async def create_chart_yaml(
    config: HelmConfig,
    output_dir: Path,
    search_paths: Iterable[Path],
    properties: Mapping[str, str] | None = None,
) -> Chart:
    """Assemble the chart and write it to the output directory."""
    chart = await assemble(config, search_paths, properties)
    await write_chart(chart, output_dir)
    return chart
