# agent_sandbox/commands/debug_command.py
import logging
from typing import TYPE_CHECKING

from rich.markup import escape

from agent_sandbox.commands.arguments import match_command

if TYPE_CHECKING:
    from agent_sandbox.app_state import AppState

def try_handle_debug_command(user_input: str, app_state: 'AppState') -> bool:
    args_text = match_command(user_input, ("/debug",))
    if args_text is None:
        return False

    if not args_text:
        app_state.console.print("[yellow]Usage: /debug <on|off>[/yellow]")
        app_state.console.print(f"[dim]Current LLM interaction debug mode: {'ON' if app_state.DEBUG_LLM_INTERACTIONS else 'OFF'}[/dim]")
        return True

    action = args_text.lower()
    if action == "on":
        app_state.DEBUG_LLM_INTERACTIONS = True
        logging.getLogger("agent_sandbox").setLevel(logging.DEBUG)
        app_state.console.print("[green]✓ LLM Interaction Debugging: ON[/green]")
    elif action == "off":
        app_state.DEBUG_LLM_INTERACTIONS = False
        logging.getLogger("agent_sandbox").setLevel(logging.NOTSET)
        app_state.console.print("[yellow]✓ LLM Interaction Debugging: OFF[/yellow]")
    else:
        app_state.console.print(f"[yellow]Unknown /debug action: {escape(args_text)}. Usage: /debug <on|off>[/yellow]")
    return True
