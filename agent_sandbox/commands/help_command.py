# agent_sandbox/commands/help_command.py
from typing import TYPE_CHECKING

from rich.markup import escape
from rich.panel import Panel

from agent_sandbox.commands.arguments import match_command
from agent_sandbox.config_utils import SUPPORTED_SET_PARAMS
from agent_sandbox.prompts import RichMarkdown

if TYPE_CHECKING:
    from agent_sandbox.app_state import AppState

HELP_TEXT = """\
Describe what you want built and the agent will write files and run commands in the working directory.

| Command | Description |
|---|---|
| `/help [set]` | Show this help, or the parameters `/set` accepts. |
| `/files` | List the files written during this session. |
| `/clear` | Clear the conversation history and the session file list. |
| `/set <parameter> <value>` | Override a model parameter for this session. `/set` alone lists overrides, `/set <parameter>` shows the current value, `/set <parameter> default` drops the override. |
| `/config [show\|path]` | Show every setting with where it comes from, or just the config file locations. |
| `/shell <command>` | Run an allowlisted command through the same sandbox the agent uses. |
| `/debug on\\|off` | Toggle printing of LLM request parameters. |
| `exit`, `quit` | Leave the session. |

Every path must stay inside the working directory, and every command must be on the allowlist.
"""


def _set_parameters_markdown() -> str:
    lines = ["| Parameter | Environment variable | Description |", "|---|---|---|"]
    for name, p_config in SUPPORTED_SET_PARAMS.items():
        lines.append(f"| `{name}` | `{p_config['env_var']}` | {p_config['description']} |")
    return "\n".join(lines)


def try_handle_help_command(user_input: str, app_state: 'AppState') -> bool:
    args_text = match_command(user_input, ("/help",))
    if args_text is None:
        return False

    topic = args_text.lower()
    if topic == "set":
        content, title = _set_parameters_markdown(), "Settable Parameters"
    else:
        if topic:
            app_state.console.print(f"[yellow]Unknown help topic '{escape(topic)}'. Showing general help.[/yellow]")
        content, title = HELP_TEXT, "Help"

    app_state.console.print(Panel(
        RichMarkdown(content), title=f"[bold blue]📚 Agent Sandbox {title}[/bold blue]", title_align="left", border_style="blue"
    ))
    return True
