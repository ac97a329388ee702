# tests/conftest.py
import io
from unittest.mock import MagicMock

import pytest
from rich.console import Console

from agent_sandbox.app_state import AppState


@pytest.fixture
def console_output():
    return io.StringIO()

@pytest.fixture
def app_state(tmp_path, console_output):
    """AppState wired to a temp project, a captured console and a scripted prompt session."""
    prompt_session = MagicMock()
    prompt_session.prompt.return_value = "y"
    console = Console(file=console_output, width=120, color_system=None)
    return AppState(tmp_path, console=console, prompt_session=prompt_session)
