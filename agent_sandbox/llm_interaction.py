# agent_sandbox/llm_interaction.py
import copy
import json
import logging
import time
from typing import TYPE_CHECKING, Any, Dict, List

from litellm import completion
from rich.console import Console
from rich.json import JSON as RichJSON
from rich.markup import escape
from rich.panel import Panel

from agent_sandbox.config_utils import TOOL_OUTPUT_MAX_CHARS, get_config_value
from agent_sandbox.data_models import ToolResult
from agent_sandbox.prompts import RichMarkdown
from agent_sandbox.tool_defs import RISKY_TOOLS, tools

if TYPE_CHECKING:
    from agent_sandbox.app_state import AppState

logger = logging.getLogger(__name__)

MAX_TOOL_ROUNDS = 25
TRUNCATION_MARKER = "\n... (truncated)"
PREVIEW_CHARS = 100


def truncate_tool_output(text: str, limit: int = TOOL_OUTPUT_MAX_CHARS) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + TRUNCATION_MARKER


def format_tool_result(result: ToolResult) -> str:
    """The text the model sees for one tool call."""
    if result.success:
        return truncate_tool_output(result.output)
    text = f"Error: {result.error}"
    return truncate_tool_output(text)


def decode_tool_arguments(raw_arguments: Any) -> Any:
    """JSON-decode tool arguments. Undecodable input is passed through so the executor rejects it."""
    if isinstance(raw_arguments, dict):
        return raw_arguments
    if raw_arguments is None or raw_arguments == "":
        return {}
    try:
        return json.loads(raw_arguments)
    except (json.JSONDecodeError, TypeError):
        logger.debug("Could not decode tool arguments: %r", raw_arguments)
        return raw_arguments


def preview_risky_call(tool_name: str, arguments: Any, console: Console):
    """Show what a mutating tool call is about to do."""
    if tool_name not in RISKY_TOOLS or not isinstance(arguments, dict):
        return
    if tool_name == "write_file":
        content = arguments.get("content", "")
        content = content if isinstance(content, str) else json.dumps(content, indent=2, default=str)
        summary = content[:PREVIEW_CHARS] + "..." if len(content) > PREVIEW_CHARS else content
        console.print(f"   Action: Create/overwrite file '{escape(str(arguments.get('path')))}'")
        console.print(Panel(escape(summary), title="Content Preview", border_style="yellow", expand=False))


def build_completion_params(app_state: 'AppState', messages: List[Dict[str, Any]]) -> Dict[str, Any]:
    model_name = get_config_value("model", app_state.RUNTIME_OVERRIDES, app_state.console)
    completion_params: Dict[str, Any] = {
        "model": model_name,
        "messages": messages,
        "tools": tools,
        "max_tokens": get_config_value("max_tokens", app_state.RUNTIME_OVERRIDES, app_state.console),
        "temperature": get_config_value("temperature", app_state.RUNTIME_OVERRIDES, app_state.console),
        "stream": False,
    }
    api_base = get_config_value("api_base", app_state.RUNTIME_OVERRIDES, app_state.console)
    if api_base:
        completion_params["api_base"] = api_base
    # LM Studio ignores the key but LiteLLM insists on one.
    if str(model_name).startswith("lm_studio/"):
        completion_params["api_key"] = "dummy"
    return completion_params


def _format_tool_calls(raw_tool_calls) -> List[Dict[str, Any]]:
    formatted = []
    for i, tc in enumerate(raw_tool_calls):
        if not tc.function.name:
            continue
        tool_id = tc.id if tc.id else f"call_{i}_{int(time.time() * 1000)}"
        formatted.append({
            "id": tool_id,
            "type": "function",
            "function": {"name": tc.function.name, "arguments": tc.function.arguments},
        })
    return formatted


def _debug_request(completion_params: Dict[str, Any]):
    debug_console = Console(stderr=True)
    debug_console.print(f"[dim bold red]LLM DEBUG: Request Params ({completion_params['model']}):[/dim bold red]")
    debug_params_log = {k: v for k, v in completion_params.items() if k not in ("messages", "tools")}
    debug_params_log["messages"] = f"{len(completion_params['messages'])} messages"
    debug_console.print(RichJSON(json.dumps(debug_params_log, indent=2, default=str)))
    debug_console.print(f"[dim red]Last message: {escape(json.dumps(completion_params['messages'][-1], default=str))}[/dim red]")


def run_agent_turn(user_message: str, app_state: 'AppState') -> Dict[str, Any]:
    """
    Sends the user message and conversation history to the LLM, executes the
    tool calls it asks for and feeds the results back until it replies without
    calling a tool.
    Returns a dictionary indicating success or error.
    """
    console = app_state.console
    app_state.conversation_history.append({"role": "user", "content": user_message})

    for _ in range(MAX_TOOL_ROUNDS):
        messages = [{"role": "system", "content": app_state.system_prompt}]
        messages.extend(copy.deepcopy(app_state.conversation_history))
        completion_params = build_completion_params(app_state, messages)

        if app_state.DEBUG_LLM_INTERACTIONS:
            _debug_request(completion_params)

        try:
            with console.status("[bold bright_blue]Thinking...[/bold bright_blue]"):
                response = completion(**completion_params)
        except Exception as e:
            error_msg = f"LLM API error: {str(e)}"
            console.print(f"\n[bold red]❌ {escape(error_msg)}[/bold red]")
            # Recorded as a system message so the model is not confused by it
            app_state.conversation_history.append({"role": "system", "content": f"Error during LLM call: {error_msg}"})
            return {"error": error_msg}

        message = response.choices[0].message
        content = message.content or ""
        tool_calls = _format_tool_calls(getattr(message, "tool_calls", None) or [])

        if content:
            console.print(RichMarkdown(content))

        assistant_message: Dict[str, Any] = {"role": "assistant", "content": content or None}
        if not tool_calls:
            app_state.conversation_history.append(assistant_message)
            return {"success": True, "content": content}

        assistant_message["tool_calls"] = tool_calls
        app_state.conversation_history.append(assistant_message)

        console.print(f"\n[bold bright_cyan]⚡ Executing {len(tool_calls)} tool call(s)...[/bold bright_cyan]")
        for tool_call in tool_calls:
            tool_name = tool_call["function"]["name"]
            arguments = decode_tool_arguments(tool_call["function"]["arguments"])
            preview_risky_call(tool_name, arguments, console)
            result = app_state.tool_executor.execute(tool_name, arguments)
            app_state.conversation_history.append({
                "role": "tool",
                "tool_call_id": tool_call["id"],
                "content": format_tool_result(result),
            })

    error_msg = f"Stopped after {MAX_TOOL_ROUNDS} rounds of tool calls without a final answer."
    console.print(f"[bold yellow]⚠️ {error_msg}[/bold yellow]")
    return {"error": error_msg}
