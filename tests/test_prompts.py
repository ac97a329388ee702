# tests/test_prompts.py
from agent_sandbox.prompts import system_PROMPT
from agent_sandbox.tool_defs import tools

def test_system_prompt_exists_and_is_string():
    """Verify that system_PROMPT exists and is a non-empty string."""
    assert isinstance(system_PROMPT, str)
    assert len(system_PROMPT.strip()) > 0

def test_system_prompt_mentions_every_tool():
    for tool_def in tools:
        assert tool_def["function"]["name"] in system_PROMPT

def test_system_prompt_explains_sandbox_rules():
    assert "## Sandbox rules:" in system_PROMPT
    assert "User declined to run this command" in system_PROMPT
    assert "skipValidation" in system_PROMPT

def test_system_prompt_is_dedented():
    assert not system_PROMPT.startswith(" ")
