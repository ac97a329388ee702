# agent_sandbox/ui_display.py
from typing import TYPE_CHECKING, Callable

from prompt_toolkit import PromptSession
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from agent_sandbox.config_utils import get_config_value

if TYPE_CHECKING:
    from agent_sandbox.app_state import AppState


class ConsoleToolReporter:
    """Prints tool progress to a rich Console."""

    def __init__(self, console: Console):
        self.console = console

    def tool_call(self, tool_name: str, detail: str) -> None:
        self.console.print(f"[bold yellow]{escape(f'[Tool: {tool_name}]')}[/bold yellow]")
        if detail:
            self.console.print(f"  [dim]{escape(detail)}[/dim]", highlight=False)

    def tool_result(self, success: bool, message: str = "") -> None:
        if success:
            self.console.print(f"  [green]✓[/green] {escape(message)}" if message else "  [green]✓ Done[/green]")
        else:
            self.console.print(f"  [red]✗ {escape(message or 'Failed')}[/red]", highlight=False)

    def warning(self, message: str) -> None:
        self.console.print(f"  [yellow]⚠ {escape(message)}[/yellow]", highlight=False)


def make_confirm(prompt_session: PromptSession, console: Console) -> Callable[[str], bool]:
    """Builds the confirmation callback the executor calls before running a command."""
    def confirm(question: str) -> bool:
        answer = prompt_session.prompt(f"{question} [y/N]: ", default="n").strip().lower()
        approved = answer in ("y", "yes")
        if not approved:
            console.print("[yellow]ℹ️ Command not run.[/yellow]")
        return approved
    return confirm


def auto_confirm(question: str) -> bool:
    return True


def display_welcome_panel(app_state: 'AppState'):
    """Displays the welcome panel."""
    current_model = get_config_value("model", app_state.RUNTIME_OVERRIDES, app_state.console)
    executor = app_state.tool_executor
    confirm_note = "[bold red]off (--noconfirm)[/bold red]" if app_state.NO_CONFIRM else "[green]on[/green]"

    instructions = f"""  📁 [bold bright_blue]Working Directory: [/bold bright_blue][bold green]{executor.working_directory}[/bold green]
     Every path the agent touches must stay inside this directory.

  🧠 [bold bright_blue]Model: [/bold bright_blue][bold magenta]{current_model}[/bold magenta]

  🛡️ [bold bright_blue]Command confirmation: [/bold bright_blue]{confirm_note} | [dim]{len(executor.policy)} allowlisted commands, {executor.settings.command_timeout_seconds:g}s timeout[/dim]

  ❓ [bold bright_blue]/help[/bold bright_blue] - Available commands.

  👥 [bold white]Describe what you want built; the agent writes files and runs commands for you.[/bold white]"""

    app_state.console.print(Panel(
        instructions,
        border_style="blue",
        padding=(1, 2),
        title="[bold blue]🎯 Welcome to Agent Sandbox[/bold blue]",
        title_align="left"
    ))
    app_state.console.print()
