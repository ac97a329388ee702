# agent_sandbox/command_handlers.py
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from agent_sandbox.app_state import AppState

from agent_sandbox.commands.config_command import try_handle_config_command
from agent_sandbox.commands.debug_command import try_handle_debug_command
from agent_sandbox.commands.help_command import try_handle_help_command
from agent_sandbox.commands.session_command import try_handle_clear_command, try_handle_files_command
from agent_sandbox.commands.set_command import try_handle_set_command
from agent_sandbox.commands.shell_command import try_handle_shell_command

COMMAND_HANDLERS = (
    try_handle_help_command,
    try_handle_files_command,
    try_handle_clear_command,
    try_handle_set_command,
    try_handle_config_command,
    try_handle_shell_command,
    try_handle_debug_command,
)


def try_handle_command(user_input: str, app_state: 'AppState') -> bool:
    """Returns True if user_input was a slash command and has been handled."""
    if not user_input.strip().startswith("/"):
        return False
    for handler in COMMAND_HANDLERS:
        if handler(user_input, app_state):
            return True
    app_state.console.print(f"[yellow]Unknown command: {user_input.split()[0]}. Type /help for the list of commands.[/yellow]")
    return True
