# tests/test_command_handlers.py
import logging
import os
from unittest.mock import patch

import pytest

from agent_sandbox.command_handlers import try_handle_command
from agent_sandbox.commands.arguments import match_command, split_arguments
from agent_sandbox.commands.config_command import try_handle_config_command
from agent_sandbox.commands.debug_command import try_handle_debug_command
from agent_sandbox.commands.help_command import try_handle_help_command
from agent_sandbox.commands.session_command import try_handle_clear_command, try_handle_files_command
from agent_sandbox.commands.set_command import try_handle_set_command
from agent_sandbox.commands.shell_command import try_handle_shell_command


@pytest.mark.parametrize("handler", [
    try_handle_help_command,
    try_handle_set_command,
    try_handle_config_command,
    try_handle_shell_command,
    try_handle_debug_command,
    try_handle_files_command,
    try_handle_clear_command,
])
def test_handlers_ignore_plain_input(handler, app_state):
    assert handler("build me a website", app_state) is False

def test_dispatch_ignores_plain_input(app_state):
    assert try_handle_command("hello there", app_state) is False

def test_dispatch_unknown_command(app_state, console_output):
    assert try_handle_command("/frobnicate now", app_state) is True
    assert "Unknown command: /frobnicate" in console_output.getvalue()


class TestArguments:

    @pytest.mark.parametrize("user_input, expected", [
        ("/set", ""),
        ("  /SET model  gpt-4o ", "model  gpt-4o"),
        ("/settings", None),
        ("/shell 'a  b'", None),
        ("hello", None),
        ("", None),
    ])
    def test_match_command(self, user_input, expected):
        assert match_command(user_input, ("/set",)) == expected

    def test_match_any_of_several_names(self):
        assert match_command("/! grep 'a  b' x.txt", ("/shell", "/!")) == "grep 'a  b' x.txt"

    def test_split_arguments(self):
        assert split_arguments("") == []
        assert split_arguments("model  ollama_chat/qwen extra", maxsplit=1) == ["model", "ollama_chat/qwen extra"]


class TestHelp:

    def test_general_help(self, app_state, console_output):
        assert try_handle_help_command("/help", app_state)
        output = console_output.getvalue()
        assert "/shell" in output
        assert "/files" in output

    def test_set_topic_lists_parameters(self, app_state, console_output):
        try_handle_help_command("/help set", app_state)
        output = console_output.getvalue()
        assert "LITELLM_MODEL" in output
        assert "temperature" in output


class TestSet:

    def test_sets_override(self, app_state):
        assert try_handle_set_command("/set temperature 0.2", app_state)
        assert app_state.RUNTIME_OVERRIDES == {"temperature": 0.2}

    def test_unknown_parameter(self, app_state, console_output):
        try_handle_set_command("/set colour blue", app_state)
        assert app_state.RUNTIME_OVERRIDES == {}
        assert "Unknown parameter 'colour'" in console_output.getvalue()

    def test_parameter_alone_shows_value_and_source(self, app_state, console_output):
        app_state.RUNTIME_OVERRIDES["model"] = "gpt-4o"
        try_handle_set_command("/set model", app_state)
        assert "model = 'gpt-4o' (from runtime)" in console_output.getvalue()

    def test_default_drops_override(self, app_state, console_output):
        try_handle_set_command("/set max_tokens 100", app_state)
        try_handle_set_command("/set max_tokens default", app_state)
        assert app_state.RUNTIME_OVERRIDES == {}
        assert "Runtime override removed: max_tokens" in console_output.getvalue()

    def test_default_without_override(self, app_state, console_output):
        try_handle_set_command("/set model default", app_state)
        assert "No runtime override for model" in console_output.getvalue()

    def test_longer_command_word_is_not_set(self, app_state):
        assert try_handle_set_command("/settings model x", app_state) is False
        assert app_state.RUNTIME_OVERRIDES == {}

    def test_no_args_lists_overrides(self, app_state, console_output):
        app_state.RUNTIME_OVERRIDES["model"] = "gpt-4o"
        try_handle_set_command("/set", app_state)
        assert "model: gpt-4o" in console_output.getvalue()


class TestShell:

    def test_usage(self, app_state, console_output):
        assert try_handle_shell_command("/shell", app_state)
        assert "Usage: /shell" in console_output.getvalue()

    def test_routes_through_sandbox(self, app_state):
        with patch.object(app_state.tool_executor, "execute", wraps=app_state.tool_executor.execute) as spy:
            try_handle_shell_command("/! rm -rf / ; echo done", app_state)
        spy.assert_called_once_with("run_command", {"command": "rm -rf / ; echo done"})
        app_state.prompt_session.prompt.assert_not_called()

    @patch("agent_sandbox.tool_executor.subprocess.Popen")
    def test_disallowed_program_never_spawns(self, mock_popen, app_state):
        try_handle_shell_command("/shell curl http://example.com", app_state)
        mock_popen.assert_not_called()

    @pytest.mark.skipif(os.name != "posix", reason="uses ls")
    def test_confirmed_command_runs(self, app_state, console_output, tmp_path):
        (tmp_path / "marker.txt").write_text("x")
        try_handle_shell_command("/shell ls", app_state)
        app_state.prompt_session.prompt.assert_called_once()
        assert "marker.txt" in console_output.getvalue()


class TestDebug:

    def test_toggle(self, app_state):
        try_handle_debug_command("/debug on", app_state)
        assert app_state.DEBUG_LLM_INTERACTIONS is True
        assert logging.getLogger("agent_sandbox").level == logging.DEBUG
        try_handle_debug_command("/debug off", app_state)
        assert app_state.DEBUG_LLM_INTERACTIONS is False
        assert logging.getLogger("agent_sandbox").level == logging.NOTSET

    def test_status(self, app_state, console_output):
        try_handle_debug_command("/debug", app_state)
        assert "debug mode: OFF" in console_output.getvalue()

    def test_unknown_action(self, app_state, console_output):
        try_handle_debug_command("/debug loud", app_state)
        assert "Unknown /debug action: loud" in console_output.getvalue()


class TestSessionCommands:

    def test_files_empty(self, app_state, console_output):
        assert try_handle_files_command("/files", app_state)
        assert "No files written" in console_output.getvalue()

    def test_files_lists_created(self, app_state, console_output):
        app_state.tool_executor.execute("write_file", {"path": "index.html", "content": "<html></html>"})
        try_handle_files_command("/files", app_state)
        assert "index.html" in console_output.getvalue()

    def test_clear(self, app_state):
        app_state.conversation_history.append({"role": "user", "content": "hi"})
        app_state.tool_executor.execute("write_file", {"path": "a.txt", "content": "x"})
        assert try_handle_clear_command("/clear", app_state)
        assert app_state.conversation_history == []
        assert app_state.tool_executor.get_created_files() == []


class TestConfig:

    def test_show_lists_every_parameter_with_source(self, app_state, console_output, monkeypatch, tmp_path):
        monkeypatch.setenv("AIS_CONFIG_DIR", str(tmp_path / "user-config"))
        app_state.RUNTIME_OVERRIDES["temperature"] = 0.1
        assert try_handle_config_command("/config", app_state)
        output = console_output.getvalue()
        for name in ("model", "api_base", "max_tokens", "temperature", "command_timeout_seconds", "resolve_symlinks"):
            assert name in output
        assert "runtime" in output
        assert "allowed_commands" in output
        assert "User config directory:" in output

    def test_path(self, app_state, console_output, monkeypatch, tmp_path):
        user_dir = tmp_path / "user-config"
        user_dir.mkdir()
        (user_dir / "config.toml").write_text("[litellm]\n")
        monkeypatch.setenv("AIS_CONFIG_DIR", str(user_dir))
        try_handle_config_command("/config path", app_state)
        output = console_output.getvalue()
        assert str(user_dir) in output
        assert "(found)" in output

    def test_unknown_action(self, app_state, console_output):
        try_handle_config_command("/config delete", app_state)
        assert "Unknown /config action: delete" in console_output.getvalue()
