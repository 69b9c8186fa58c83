"""CLI entry point."""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Callable, Optional, Sequence

from .chat_adapters import ConsolePresenter, IPresenter
from .core import (
    Config,
    ConfigError,
    ConversationStore,
    DispatchGateway,
    JsonFileKeyValueStore,
    SessionController,
    load_config,
)
from .core.command_parser import ParsedCommand, help_lines, parse_command

LOGGER = logging.getLogger(__name__)


def cli(argv: Sequence[str] | None = None) -> int:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(
        prog="product-advisor",
        description="Product Advisor - topic-scoped chat with a remote completion service",
    )
    parser.add_argument(
        "--config-dir",
        help="Directory holding .env and persona.yaml (default: ~/.product-advisor)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    subparsers.add_parser("chat", help="Start an interactive chat session (default)")
    subparsers.add_parser("reset", help="Clear the stored conversation and exit")

    args = parser.parse_args(argv)

    # Log lines share the terminal with the chat, so only warnings by default
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config_dir)
    except ConfigError as exc:
        LOGGER.error("Configuration error: %s", exc)
        return 1

    log_level = getattr(logging, config.log_level, logging.WARNING)
    logging.getLogger().setLevel(log_level)

    if args.command == "reset":
        return _run_reset(config)

    try:
        _run_chat(config)
    except KeyboardInterrupt:
        LOGGER.info("Interrupted by user")
        return 130
    return 0


def build_controller(config: Config, presenter: IPresenter) -> SessionController:
    store = ConversationStore(
        JsonFileKeyValueStore(config.storage_path),
        system_prompt=config.persona.system_prompt,
    )
    return SessionController(
        store=store,
        gateway=DispatchGateway(config.transport),
        presenter=presenter,
        persona=config.persona,
    )


def _run_reset(config: Config) -> int:
    store = ConversationStore(
        JsonFileKeyValueStore(config.storage_path),
        system_prompt=config.persona.system_prompt,
    )
    store.reset()
    print(f"Cleared stored conversation at {config.storage_path}")
    return 0


def _run_chat(config: Config, read_line: Optional[Callable[[str], str]] = None) -> None:
    """Run the REPL until quit, end of input, or Ctrl-C.

    The prompt is read on the main thread so Ctrl-C interrupts it directly;
    each line is then processed to completion on one long-lived event loop.
    """
    read_line = read_line or input
    LOGGER.info("Using config directory: %s", config.config_dir)
    LOGGER.info("Transport: %s", config.transport.describe())

    presenter = ConsolePresenter(assistant_label=config.persona.assistant_label)
    controller = build_controller(config, presenter)
    controller.start()
    print("Type !help for commands.")

    loop = asyncio.new_event_loop()
    try:
        while True:
            try:
                line = read_line("> ")
            except EOFError:
                break
            if not loop.run_until_complete(_process_line(line, controller)):
                break
    finally:
        _cancel_pending(loop)
        loop.close()

    LOGGER.info("Session closed")


def _cancel_pending(loop: asyncio.AbstractEventLoop) -> None:
    pending = asyncio.all_tasks(loop)
    if not pending:
        return
    for task in pending:
        task.cancel()
    loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))


async def _process_line(line: str, controller: SessionController) -> bool:
    """Handle one line of input. Returns False when the session should end."""
    command = parse_command(line)
    if command is None:
        await controller.handle_input(line)
        return True
    return await _handle_command(command, controller)


async def _handle_command(command: ParsedCommand, controller: SessionController) -> bool:
    """Run a REPL command. Returns False when the session should end."""
    if not command.known:
        print(f"Unknown command `!{command.name}`. Use `!help` to see supported commands.")
    elif command.name == "quit":
        return False
    elif command.name == "name":
        await controller.rename(command.argument or None)
    elif command.name == "reset":
        await controller.reset()
    elif command.name == "help":
        for line in help_lines():
            print(line)
    return True


def run() -> None:
    raise SystemExit(cli())


if __name__ == "__main__":
    raise SystemExit(cli())
