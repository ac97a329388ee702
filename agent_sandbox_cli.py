#!/usr/bin/env python3

"""
Agent Sandbox: a terminal coding agent confined to one project directory.

The model asks for files to be written, read and listed, and for commands to
be run; every request goes through the sandboxed tool executor, which keeps
paths inside the working directory, runs only allowlisted commands and asks
before running any of them.
"""
import argparse
import logging
import sys

import litellm
from rich.console import Console

from agent_sandbox.app_state import AppState
from agent_sandbox.command_handlers import try_handle_command
from agent_sandbox.config_utils import (
    build_sandbox_settings,
    get_working_directory,
    load_configuration,
    update_runtime_override,
)
from agent_sandbox.llm_interaction import run_agent_turn
from agent_sandbox.logging_utils import configure_logging
from agent_sandbox.ui_display import display_welcome_panel

__version__ = "0.1.0"

# Suppress LiteLLM debug info
litellm.suppress_debug_info = True

logger = logging.getLogger(__name__)

EXIT_COMMANDS = ("exit", "quit", "/exit", "/quit")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Agent Sandbox: a terminal coding agent confined to one project directory.",
        formatter_class=argparse.RawTextHelpFormatter
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--cwd', metavar='DIRECTORY', type=str,
                        help='Project directory the agent is confined to (default: AIS_WORKING_DIRECTORY or the current directory).')
    parser.add_argument('--model', metavar='MODEL', type=str,
                        help='LiteLLM model for this session (overrides LITELLM_MODEL and config.toml).')
    parser.add_argument('--noconfirm', action='store_true',
                        help='Run allowlisted commands without asking for confirmation.')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging and LLM request dumps.')
    return parser


def main(argv=None):
    args = build_arg_parser().parse_args(argv)
    console = Console()

    configure_logging(args.debug)
    load_configuration(console)

    try:
        working_directory = get_working_directory(args.cwd)
    except NotADirectoryError as e:
        console.print(f"[bold red]{e}[/bold red]")
        sys.exit(1)

    settings = build_sandbox_settings(console)
    app_state = AppState(working_directory, settings=settings, no_confirm=args.noconfirm, console=console)
    app_state.DEBUG_LLM_INTERACTIONS = args.debug
    if args.model:
        update_runtime_override("model", args.model, app_state.RUNTIME_OVERRIDES)
    logger.debug("Sandbox settings: %s", settings)

    display_welcome_panel(app_state)
    if args.noconfirm:
        console.print("[bold yellow]⚠️  --noconfirm: allowlisted commands will run without asking.[/bold yellow]")

    while True:
        try:
            user_input = app_state.prompt_session.prompt("🔵 You> ").strip()
        except (EOFError, KeyboardInterrupt):
            console.print("\n[bold yellow]👋 Exiting gracefully...[/bold yellow]")
            sys.exit(0)

        if not user_input:
            continue

        if user_input.lower() in EXIT_COMMANDS:
            console.print("[bold bright_blue]👋 Goodbye! Happy coding![/bold bright_blue]")
            sys.exit(0)

        try:
            if try_handle_command(user_input, app_state):
                continue
            run_agent_turn(user_input, app_state)
        except KeyboardInterrupt:
            console.print("\n[yellow]Interrupted.[/yellow]")


if __name__ == "__main__":
    main()
