"""Deploy-kit chart action."""

from argparse import ArgumentParser, _SubParsersAction as SubParsersAction
import logging
import pathlib
from typing import cast

from deploy_kit.chart import create_chart_yaml
from deploy_kit.exceptions import InputException
from deploy_kit.manifest import read_helm_config
from deploy_kit.project import read_project

from . import selector

_LOGGER = logging.getLogger(__name__)

DEFAULT_FRAGMENTS_DIR = "src/main/helm"


class ChartAction:
    """Deploy-kit chart action."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "chart",
                help="Generate the Chart.yaml for each chart type",
                description="""Merges the helm chart configuration with an optional
                    Chart.helm.yaml fragment and writes the Chart.yaml into the
                    output directory of every configured chart type.""",
            ),
        )
        args.add_argument(
            "--fragments",
            help="Directory to search for a chart fragment, may be repeated",
            type=pathlib.Path,
            action="append",
            default=None,
        )
        selector.add_project_flags(args)
        selector.add_helm_config_flags(args)
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        project: pathlib.Path,
        helm_config: pathlib.Path,
        fragments: list[pathlib.Path] | None,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        facts = await read_project(project)
        config = await read_helm_config(helm_config)
        if not config.output_dir:
            raise InputException(f"Helm config {helm_config} is missing outputDir")
        search_paths = fragments or [pathlib.Path(DEFAULT_FRAGMENTS_DIR)]
        for helm_type in config.types:
            output_dir = pathlib.Path(config.output_dir) / helm_type.output_dir
            chart = await create_chart_yaml(
                config, output_dir, search_paths, facts.properties
            )
            print(f"{helm_type.value}: {chart.name}-{chart.version} -> {output_dir}")
