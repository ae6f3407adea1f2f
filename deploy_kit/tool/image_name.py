"""Deploy-kit image-name action."""

from argparse import ArgumentParser, _SubParsersAction as SubParsersAction
import datetime
import logging
import pathlib
from typing import cast

from deploy_kit.image import ImageNameFormatter
from deploy_kit.project import MissingProperty, read_project

from . import selector

_LOGGER = logging.getLogger(__name__)


class ImageNameAction:
    """Deploy-kit image-name action."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "image-name",
                help="Format a container image name for the project",
                description="""Resolves ${property} references and the %g, %a,
                    %v, %t and %l placeholders of an image name template.""",
            ),
        )
        args.add_argument(
            "template", type=str, help="Image name template e.g. %%g/%%a:%%l"
        )
        selector.add_project_flags(args)
        selector.add_missing_property_flags(args)
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        template: str,
        project: pathlib.Path,
        missing: str,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        facts = await read_project(project)
        now = datetime.datetime.now()
        formatter = ImageNameFormatter(facts, now, MissingProperty(missing))
        print(formatter.format(template))
