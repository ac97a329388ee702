# agent_sandbox/commands/set_command.py
from typing import TYPE_CHECKING

from rich.markup import escape

from agent_sandbox.commands.arguments import match_command, split_arguments
from agent_sandbox.config_utils import (
    SUPPORTED_SET_PARAMS,
    get_config_source,
    get_config_value,
    list_runtime_overrides,
    update_runtime_override,
)

if TYPE_CHECKING:
    from agent_sandbox.app_state import AppState

SET_USAGE = "Usage: /set <parameter> <value>  |  /set <parameter>  |  /set <parameter> default"
RESET_KEYWORD = "default"


def _show_parameter(param_name: str, app_state: 'AppState'):
    value = get_config_value(param_name, app_state.RUNTIME_OVERRIDES, app_state.console)
    source = get_config_source(param_name, app_state.RUNTIME_OVERRIDES)
    app_state.console.print(f"  {param_name} = {escape(repr(value))} [dim](from {source})[/dim]")


def try_handle_set_command(user_input: str, app_state: 'AppState') -> bool:
    args_text = match_command(user_input, ("/set",))
    if args_text is None:
        return False

    args = split_arguments(args_text, maxsplit=1)
    if not args:
        list_runtime_overrides(app_state.RUNTIME_OVERRIDES, app_state.console)
        app_state.console.print(f"[dim]{SET_USAGE}  (see '/help set')[/dim]")
        return True

    param_name = args[0].lower()
    if param_name not in SUPPORTED_SET_PARAMS:
        app_state.console.print(f"[red]Error: Unknown parameter '{escape(args[0])}'. Type '/help set' for options.[/red]")
        return True

    if len(args) == 1:
        _show_parameter(param_name, app_state)
        return True

    value = args[1]
    if value.lower() == RESET_KEYWORD:
        if app_state.RUNTIME_OVERRIDES.pop(param_name, None) is None:
            app_state.console.print(f"[dim]No runtime override for {param_name}.[/dim]")
        else:
            app_state.console.print(f"[green]✓ Runtime override removed: {param_name}[/green]")
            _show_parameter(param_name, app_state)
        return True

    update_runtime_override(param_name, value, app_state.RUNTIME_OVERRIDES, app_state.console)
    return True
