# tests/test_agent_sandbox_cli.py
from unittest.mock import MagicMock, patch

import pytest

import agent_sandbox_cli


@pytest.fixture
def isolated_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("AIS_WORKING_DIRECTORY", raising=False)
    monkeypatch.setenv("AIS_CONFIG_DIR", str(tmp_path / "user-config"))
    with patch("agent_sandbox.config_utils.load_dotenv"), patch("agent_sandbox_cli.configure_logging"):
        yield tmp_path

def run_session(inputs, argv):
    session = MagicMock()
    session.prompt.side_effect = inputs
    with patch("agent_sandbox.app_state.PromptSession", return_value=session), \
            patch("agent_sandbox_cli.run_agent_turn") as mock_turn:
        with pytest.raises(SystemExit) as exc_info:
            agent_sandbox_cli.main(argv)
    return exc_info.value.code, mock_turn, session


def test_version(capsys):
    with pytest.raises(SystemExit) as exc_info:
        agent_sandbox_cli.main(["--version"])
    assert exc_info.value.code == 0
    assert agent_sandbox_cli.__version__ in capsys.readouterr().out

def test_exit_command(isolated_cwd):
    code, mock_turn, _ = run_session(["", "quit"], [])
    assert code == 0
    mock_turn.assert_not_called()

def test_eof_exits(isolated_cwd):
    code, _, _ = run_session(EOFError(), [])
    assert code == 0

def test_messages_go_to_the_agent(isolated_cwd):
    code, mock_turn, _ = run_session(["/help", "build a page", "exit"], [])
    assert code == 0
    mock_turn.assert_called_once()
    user_message, app_state = mock_turn.call_args[0]
    assert user_message == "build a page"
    assert app_state.tool_executor.working_directory == isolated_cwd.resolve()

def test_cwd_and_noconfirm(isolated_cwd):
    project = isolated_cwd / "project"
    project.mkdir()
    code, mock_turn, _ = run_session(["hi", "exit"], ["--cwd", str(project), "--noconfirm"])
    app_state = mock_turn.call_args[0][1]
    assert app_state.tool_executor.working_directory == project.resolve()
    assert app_state.NO_CONFIRM is True
    assert app_state.tool_executor.confirm("Run this command?") is True

def test_missing_cwd_exits_with_error(isolated_cwd):
    with pytest.raises(SystemExit) as exc_info:
        agent_sandbox_cli.main(["--cwd", str(isolated_cwd / "missing")])
    assert exc_info.value.code == 1

def test_model_flag_becomes_runtime_override(isolated_cwd, monkeypatch):
    monkeypatch.setenv("LITELLM_MODEL", "env_model")
    code, mock_turn, _ = run_session(["hi", "exit"], ["--model", "openai/gpt-4o"])
    app_state = mock_turn.call_args[0][1]
    assert app_state.RUNTIME_OVERRIDES == {"model": "openai/gpt-4o"}
