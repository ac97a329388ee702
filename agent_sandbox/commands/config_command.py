# agent_sandbox/commands/config_command.py
from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table

from agent_sandbox.commands.arguments import match_command
from agent_sandbox.config_utils import (
    SANDBOX_PARAMS,
    SUPPORTED_SET_PARAMS,
    get_config_file_paths,
    get_config_source,
    get_config_value,
    get_user_config_dir,
)

if TYPE_CHECKING:
    from agent_sandbox.app_state import AppState

CONFIG_USAGE = "Usage: /config [show|path]"


def _show_configuration(app_state: 'AppState'):
    table = Table(title="Effective configuration", title_justify="left", show_lines=False)
    table.add_column("Parameter", style="bold cyan")
    table.add_column("Value")
    table.add_column("Source", style="dim")

    for name in SUPPORTED_SET_PARAMS:
        value = get_config_value(name, app_state.RUNTIME_OVERRIDES, app_state.console)
        table.add_row(name, escape(str(value)), get_config_source(name, app_state.RUNTIME_OVERRIDES))

    # Sandbox limits as the executor was built with them
    settings = app_state.tool_executor.settings
    for name in SANDBOX_PARAMS:
        table.add_row(name, escape(str(getattr(settings, name))), get_config_source(name))
    table.add_row("allowed_commands", f"{len(settings.allowed_commands)} commands", "startup")

    app_state.console.print(table)
    _show_paths(app_state)


def _show_paths(app_state: 'AppState'):
    app_state.console.print(f"[bold blue]User config directory:[/bold blue] {escape(str(get_user_config_dir()))}")
    for path in get_config_file_paths():
        state = "[green]found[/green]" if path.is_file() else "[dim]not found[/dim]"
        app_state.console.print(f"  - {escape(str(path.expanduser().absolute()))} ({state})")


def try_handle_config_command(user_input: str, app_state: 'AppState') -> bool:
    args_text = match_command(user_input, ("/config",))
    if args_text is None:
        return False

    action = args_text.lower()
    if action in ("", "show"):
        _show_configuration(app_state)
    elif action == "path":
        _show_paths(app_state)
    else:
        app_state.console.print(f"[yellow]Unknown /config action: {escape(args_text)}. {CONFIG_USAGE}[/yellow]")
    return True
