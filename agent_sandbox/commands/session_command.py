# agent_sandbox/commands/session_command.py
from typing import TYPE_CHECKING

from rich.markup import escape

from agent_sandbox.commands.arguments import match_command

if TYPE_CHECKING:
    from agent_sandbox.app_state import AppState

def try_handle_files_command(user_input: str, app_state: 'AppState') -> bool:
    if match_command(user_input, ("/files",)) is None:
        return False

    created_files = app_state.tool_executor.get_created_files()
    if not created_files:
        app_state.console.print("[dim]No files written in this session.[/dim]")
        return True
    app_state.console.print(f"[bold blue]Files written this session ({len(created_files)}):[/bold blue]")
    for path in created_files:
        app_state.console.print(f"  - {escape(path)}", highlight=False)
    return True

def try_handle_clear_command(user_input: str, app_state: 'AppState') -> bool:
    if match_command(user_input, ("/clear",)) is None:
        return False

    app_state.conversation_history.clear()
    app_state.tool_executor.clear_created_files()
    app_state.console.print("[green]✓ Conversation history and session file list cleared.[/green]")
    return True
