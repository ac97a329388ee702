# agent_sandbox/app_state.py
from pathlib import Path
from typing import Any, Dict, List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.styles import Style as PromptStyle
from rich.console import Console

from agent_sandbox.config_utils import SandboxSettings
from agent_sandbox.prompts import system_PROMPT
from agent_sandbox.tool_executor import ToolExecutor
from agent_sandbox.ui_display import ConsoleToolReporter, auto_confirm, make_confirm


class AppState:
    def __init__(
        self,
        working_directory: Path,
        settings: Optional[SandboxSettings] = None,
        no_confirm: bool = False,
        console: Optional[Console] = None,
        prompt_session: Optional[PromptSession] = None,
    ):
        self.console = console or Console()
        self.prompt_session = prompt_session or PromptSession(
            style=PromptStyle.from_dict({
                'prompt': '#0066ff bold',
                'completion-menu.completion': 'bg:#1e3a8a fg:#ffffff',
                'completion-menu.completion.current': 'bg:#3b82f6 fg:#ffffff bold',
            })
        )
        # Conversation history stores user/assistant/tool turns.
        # The system prompt is prepended by llm_interaction on every call.
        self.conversation_history: List[Dict[str, Any]] = []
        self.DEBUG_LLM_INTERACTIONS: bool = False
        self.RUNTIME_OVERRIDES: Dict[str, Any] = {}
        self.NO_CONFIRM = no_confirm
        self.system_prompt = system_PROMPT

        confirm = auto_confirm if no_confirm else make_confirm(self.prompt_session, self.console)
        self.tool_executor = ToolExecutor(
            working_directory,
            reporter=ConsoleToolReporter(self.console),
            confirm=confirm,
            settings=settings,
        )
