"""Command line tool for formatting image names and publishing helm charts."""

import argparse
import asyncio
import logging
import sys
import traceback

from deploy_kit.exceptions import DeployKitException
from . import chart, image_name, push

_LOGGER = logging.getLogger(__name__)


def _make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Command line utility for building and publishing deployable artifacts.",
    )
    parser.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    )

    subparsers = parser.add_subparsers(dest="command", help="Command", required=True)

    image_name.ImageNameAction.register(subparsers)
    chart.ChartAction.register(subparsers)
    push.PushAction.register(subparsers)
    return parser


def main(argv: list[str] | None = None) -> None:
    """Deploy-kit command line tool main entry point."""
    parser = _make_parser()
    args = parser.parse_args(argv)

    if args.log_level:
        logging.basicConfig(level=args.log_level)

    action = args.cls()
    try:
        asyncio.run(action.run(**vars(args)))
    except DeployKitException as err:
        if args.log_level == "DEBUG":
            traceback.print_exc(file=sys.stderr)
        print("deploy-kit error: ", err, file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
