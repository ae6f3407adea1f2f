"""Deploy-kit push action."""

from argparse import ArgumentParser, _SubParsersAction as SubParsersAction
import logging
import pathlib
from typing import cast

from deploy_kit.helm import publish
from deploy_kit.manifest import read_helm_config, read_settings
from deploy_kit.upload import HelmUploader

from . import selector

_LOGGER = logging.getLogger(__name__)


class PushAction:
    """Deploy-kit push action."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "push",
                help="Package and upload the chart to the chart repository",
                description="""Packages the generated chart of every chart type and
                    uploads it to the snapshot or stable repository depending
                    on the chart version.""",
            ),
        )
        args.add_argument(
            "--settings",
            help="Optional yaml file with a list of servers holding repository credentials",
            type=pathlib.Path,
            default=None,
        )
        selector.add_helm_config_flags(args)
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        helm_config: pathlib.Path,
        settings: pathlib.Path | None,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        config = await read_helm_config(helm_config)
        servers = []
        if settings is not None:
            servers = (await read_settings(settings)).servers
        await publish(config, servers, HelmUploader())
