# agent_sandbox/config_utils.py
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import toml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from agent_sandbox.command_policy import DEFAULT_ALLOWED_COMMANDS, CommandPolicy

# Module-level limits
MAX_FILES_TO_LIST = 1000
MAX_FILE_SIZE_BYTES = 5_000_000  # 5MB
TOOL_OUTPUT_MAX_CHARS = 2000  # tool results sent back to the model are cut here

# --- Ultimate Fallback Defaults ---
# Used when config.toml is missing or a key is not found,
# and no environment variable or runtime override is set.
ULTIMATE_DEFAULTS: Dict[str, Any] = {
    "model": "ollama_chat/mistral-small",
    "api_base": None,
    "max_tokens": 4096,
    "temperature": 0.6,
    "command_timeout_seconds": 60.0,
    "max_output_bytes": 1_000_000,
    "max_file_size_bytes": MAX_FILE_SIZE_BYTES,
    "resolve_symlinks": True,
}

# Flattened view of config.toml, filled by load_configuration()
_CONFIG_FROM_TOML: Dict[str, Any] = {}

WORKING_DIRECTORY_ENV_VAR = "AIS_WORKING_DIRECTORY"
EXTRA_ALLOWED_COMMANDS_ENV_VAR = "AIS_EXTRA_ALLOWED_COMMANDS"
USER_CONFIG_DIR_ENV_VAR = "AIS_CONFIG_DIR"
USER_CONFIG_DIR_NAME = ".agent-sandbox"
CONFIG_FILE_NAME = "config.toml"

# Parameters that can be changed at runtime with /set
SUPPORTED_SET_PARAMS: Dict[str, Dict[str, Any]] = {
    "model": {
        "env_var": "LITELLM_MODEL",
        "type": str,
        "description": "The language model driving the agent (e.g., 'ollama_chat/devstral', 'gpt-4o')."
    },
    "api_base": {
        "env_var": "LITELLM_API_BASE",
        "type": str,
        "description": "The API base URL for the LLM provider. Leave unset to use the provider default."
    },
    "max_tokens": {
        "env_var": "LITELLM_MAX_TOKENS",
        "type": int,
        "description": "Maximum number of tokens for each LLM response (e.g., 4096)."
    },
    "temperature": {
        "env_var": "LITELLM_TEMPERATURE",
        "type": float,
        "description": "Controls the randomness of the response (0.0 to 2.0, lower is more deterministic)."
    },
}

# Sandbox limits are read once at startup and never changed afterwards.
SANDBOX_PARAMS: Dict[str, Dict[str, Any]] = {
    "command_timeout_seconds": {"env_var": "AIS_COMMAND_TIMEOUT", "type": float},
    "max_output_bytes": {"env_var": "AIS_MAX_OUTPUT_BYTES", "type": int},
    "max_file_size_bytes": {"env_var": "AIS_MAX_FILE_SIZE", "type": int},
    "resolve_symlinks": {"env_var": "AIS_RESOLVE_SYMLINKS", "type": bool},
}

_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off"}


class SandboxSettings(BaseModel):
    command_timeout_seconds: float = ULTIMATE_DEFAULTS["command_timeout_seconds"]
    max_output_bytes: int = ULTIMATE_DEFAULTS["max_output_bytes"]
    max_file_size_bytes: int = ULTIMATE_DEFAULTS["max_file_size_bytes"]
    max_listed_entries: int = MAX_FILES_TO_LIST
    resolve_symlinks: bool = ULTIMATE_DEFAULTS["resolve_symlinks"]
    allowed_commands: Tuple[str, ...] = Field(default=DEFAULT_ALLOWED_COMMANDS)
    model_config = ConfigDict(frozen=True)

    def command_policy(self) -> CommandPolicy:
        return CommandPolicy(self.allowed_commands)


def _convert(value: Any, target_type: type) -> Any:
    """Convert a raw config value to target_type. Raises ValueError on failure."""
    if value is None:
        return None
    if target_type is bool:
        if isinstance(value, bool):
            return value
        lowered = str(value).strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
        raise ValueError(f"'{value}' is not a boolean")
    if target_type is int:
        if isinstance(value, bool):
            raise ValueError(f"'{value}' is not an integer")
        return int(value)
    if target_type is float:
        return float(value)
    return str(value)


def update_runtime_override(param_name: str, value: Any, runtime_overrides: Dict[str, Any], console_obj=None):
    """
    Updates a runtime override for a given parameter.
    Validates against SUPPORTED_SET_PARAMS.
    """
    param_name_lower = param_name.lower()
    if param_name_lower not in SUPPORTED_SET_PARAMS:
        if console_obj:
            console_obj.print(f"[red]Error: Unknown parameter '{param_name}'. Cannot set override.[/red]")
        return

    target_type = SUPPORTED_SET_PARAMS[param_name_lower]["type"]
    try:
        value = _convert(value, target_type)
        if param_name_lower == "max_tokens" and value <= 0:
            raise ValueError("Max tokens must be a positive integer.")
        if param_name_lower == "temperature" and not (0.0 <= value <= 2.0):
            raise ValueError("Temperature must be between 0.0 and 2.0.")
    except (TypeError, ValueError) as e:
        if console_obj:
            console_obj.print(f"[red]Error: Invalid value '{value}' for {param_name_lower}. {e}[/red]")
        return

    runtime_overrides[param_name_lower] = value
    if console_obj:
        console_obj.print(f"[green]✓ Runtime override set: {param_name_lower} = {value}[/green]")

def list_runtime_overrides(runtime_overrides: Dict[str, Any], console_obj):
    """Lists current runtime overrides."""
    if not runtime_overrides:
        console_obj.print("[dim]No active runtime overrides.[/dim]")
        return
    console_obj.print("[bold blue]Active Runtime Overrides:[/bold blue]")
    for key, value in runtime_overrides.items():
        console_obj.print(f"  - {key}: {value}")

def get_user_config_dir() -> Path:
    """Per-user directory holding a fallback config.toml and .env (AIS_CONFIG_DIR overrides it)."""
    raw = os.getenv(USER_CONFIG_DIR_ENV_VAR)
    return Path(raw).expanduser() if raw else Path.home() / USER_CONFIG_DIR_NAME

def get_config_file_paths() -> Tuple[Path, ...]:
    """config.toml files in the order they are applied; later files win key by key."""
    return (get_user_config_dir() / CONFIG_FILE_NAME, Path(CONFIG_FILE_NAME))

def _merge_toml_file(toml_config_path: Path, console_obj=None):
    try:
        loaded_toml = toml.load(toml_config_path)
    except (toml.TomlDecodeError, OSError, TypeError) as e:
        if console_obj:
            console_obj.print(f"[yellow]Warning: Could not load or parse {toml_config_path}: {e}. Ignoring it.[/yellow]")
        return

    litellm_section = loaded_toml.get("litellm")
    if isinstance(litellm_section, dict):
        for key in SUPPORTED_SET_PARAMS:
            if key in litellm_section:
                _CONFIG_FROM_TOML[key] = litellm_section[key]

    sandbox_section = loaded_toml.get("sandbox")
    if isinstance(sandbox_section, dict):
        for key in SANDBOX_PARAMS:
            if key in sandbox_section:
                _CONFIG_FROM_TOML[key] = sandbox_section[key]
        for key in ("allowed_commands", "extra_allowed_commands"):
            commands = sandbox_section.get(key)
            if isinstance(commands, list):
                _CONFIG_FROM_TOML[key] = [str(c) for c in commands]
            elif commands is not None and console_obj:
                console_obj.print(f"[yellow]Warning: \\[sandbox].{key} in {toml_config_path} must be a list. Ignoring it.[/yellow]")

def load_configuration(console_obj=None):
    """
    Loads .env files into environment variables and config.toml files into _CONFIG_FROM_TOML.

    The project .env is loaded first, then the one in the user config directory;
    neither overrides variables that are already set. The user config.toml is
    read first and the project config.toml on top of it.

    config.toml layout:
        [litellm]  model, api_base, max_tokens, temperature
        [sandbox]  command_timeout_seconds, max_output_bytes, max_file_size_bytes,
                   resolve_symlinks, allowed_commands, extra_allowed_commands
    """
    load_dotenv()
    user_env_path = get_user_config_dir() / ".env"
    if user_env_path.is_file():
        load_dotenv(user_env_path)
    _CONFIG_FROM_TOML.clear()

    for toml_config_path in get_config_file_paths():
        if toml_config_path.is_file():
            _merge_toml_file(toml_config_path, console_obj)

def get_config_source(param_name: str, runtime_overrides: Optional[Dict[str, Any]] = None) -> str:
    """Where get_config_value() takes param_name from: 'runtime', 'env', 'config.toml' or 'default'."""
    if runtime_overrides and param_name in SUPPORTED_SET_PARAMS and runtime_overrides.get(param_name) is not None:
        return "runtime"
    p_config = SUPPORTED_SET_PARAMS.get(param_name) or SANDBOX_PARAMS.get(param_name)
    if p_config and os.getenv(p_config["env_var"]) is not None:
        return "env"
    if param_name in _CONFIG_FROM_TOML:
        return CONFIG_FILE_NAME
    return "default"

def get_config_value(param_name: str, runtime_overrides: Optional[Dict[str, Any]] = None, console_obj=None) -> Any:
    """
    Retrieves a configuration value based on precedence:
    1. Runtime overrides (only for SUPPORTED_SET_PARAMS)
    2. Environment variables
    3. Values from config.toml (_CONFIG_FROM_TOML)
    4. Ultimate hardcoded defaults (ULTIMATE_DEFAULTS)
    """
    if param_name in SUPPORTED_SET_PARAMS:
        p_config = SUPPORTED_SET_PARAMS[param_name]
    elif param_name in SANDBOX_PARAMS:
        p_config = SANDBOX_PARAMS[param_name]
    else:
        if console_obj:
            console_obj.print(f"[yellow]Warning: Attempted to get unknown config param '{param_name}'. Using default.[/yellow]")
        return ULTIMATE_DEFAULTS.get(param_name)

    target_type = p_config["type"]
    fallback = ULTIMATE_DEFAULTS.get(param_name)

    if runtime_overrides and param_name in SUPPORTED_SET_PARAMS:
        runtime_val = runtime_overrides.get(param_name)
        if runtime_val is not None:
            return runtime_val

    env_val = os.getenv(p_config["env_var"])
    if env_val is not None:
        try:
            return _convert(env_val, target_type)
        except ValueError:
            if console_obj:
                console_obj.print(f"[yellow]Warning: Ignoring invalid value '{env_val}' in {p_config['env_var']}.[/yellow]")

    if param_name in _CONFIG_FROM_TOML:
        try:
            return _convert(_CONFIG_FROM_TOML[param_name], target_type)
        except (TypeError, ValueError):
            if console_obj:
                console_obj.print(f"[yellow]Warning: Ignoring invalid value for '{param_name}' in config.toml.[/yellow]")

    return fallback

def get_allowed_commands() -> Tuple[str, ...]:
    """The command allowlist: config.toml may replace the defaults; both config.toml and the env may extend them."""
    base = _CONFIG_FROM_TOML.get("allowed_commands")
    commands = list(base) if base is not None else list(DEFAULT_ALLOWED_COMMANDS)
    commands.extend(_CONFIG_FROM_TOML.get("extra_allowed_commands", []))
    env_extra = os.getenv(EXTRA_ALLOWED_COMMANDS_ENV_VAR)
    if env_extra:
        commands.extend(name.strip() for name in env_extra.split(",") if name.strip())
    return CommandPolicy(commands).allowed_commands

def build_sandbox_settings(console_obj=None) -> SandboxSettings:
    return SandboxSettings(
        command_timeout_seconds=get_config_value("command_timeout_seconds", console_obj=console_obj),
        max_output_bytes=get_config_value("max_output_bytes", console_obj=console_obj),
        max_file_size_bytes=get_config_value("max_file_size_bytes", console_obj=console_obj),
        resolve_symlinks=get_config_value("resolve_symlinks", console_obj=console_obj),
        allowed_commands=get_allowed_commands(),
    )

def get_working_directory(cli_value: Optional[str] = None) -> Path:
    """--cwd wins over AIS_WORKING_DIRECTORY, which wins over the process cwd."""
    raw = cli_value or os.getenv(WORKING_DIRECTORY_ENV_VAR) or os.getcwd()
    path = Path(raw).expanduser().resolve()
    if not path.is_dir():
        raise NotADirectoryError(f"Working directory does not exist: {path}")
    return path
