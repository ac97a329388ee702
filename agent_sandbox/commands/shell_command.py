# agent_sandbox/commands/shell_command.py
from typing import TYPE_CHECKING

from rich.markup import escape

from agent_sandbox.commands.arguments import match_command

if TYPE_CHECKING:
    from agent_sandbox.app_state import AppState

def try_handle_shell_command(user_input: str, app_state: 'AppState') -> bool:
    shell_command_text = match_command(user_input, ("/shell", "/!"))
    if shell_command_text is None:
        return False

    if not shell_command_text:
        app_state.console.print("[yellow]Usage: /shell <command_to_execute>  OR  /! <command_to_execute>[/yellow]")
        return True

    # Same allowlist, path guard and confirmation as the agent's own run_command calls
    result = app_state.tool_executor.execute("run_command", {"command": shell_command_text})
    if result.success:
        app_state.console.print(escape(result.output.strip()), highlight=False)
    elif result.output:
        app_state.console.print(escape(result.output.strip()), style="yellow", highlight=False)
    return True
