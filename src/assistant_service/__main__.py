from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import Optional, Sequence

from .config import AssistantConfig, build_agent_memory
from .core import AgentContext
from .orchestrator import RouteOutcome, build_default_assistant

CLI_USER_ID = "local"
USAGE = "Usage: maciek <message>"


async def _route_once(text: str, config: AssistantConfig) -> RouteOutcome:
    assistant = build_default_assistant(config)
    memory = build_agent_memory(config)
    try:
        return await assistant.route(AgentContext(user_id=CLI_USER_ID, input=text, memory=memory))
    finally:
        for provider in (memory.task_provider, memory.finance_provider):
            aclose = getattr(provider, "aclose", None)
            if aclose is not None:
                await aclose()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Точка входа CLI: одно сообщение, один ответ.
    """
    parser = argparse.ArgumentParser(prog="maciek", description="Route one message to an assistant agent.")
    parser.add_argument("message", nargs="*", help="Текст сообщения")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    text = " ".join(args.message).strip()
    if not text:
        print(USAGE)
        return 0

    try:
        outcome = asyncio.run(_route_once(text, AssistantConfig.from_env()))
    except Exception as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"[{outcome.agent.id}] {outcome.result.reply}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
