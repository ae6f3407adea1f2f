"""Test helpers for deploy-kit tools."""

import sys

from deploy_kit.command import Command, run

DEPLOY_KIT_CMD = [sys.executable, "-m", "deploy_kit"]


async def run_command(args: list[str], env: dict[str, str] | None = None) -> str:
    return await run(Command(DEPLOY_KIT_CMD + args, env=env))
