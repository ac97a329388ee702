# agent_sandbox/data_models.py
import json
import shlex
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

def _stringify_item(item: Any) -> str:
    if isinstance(item, str):
        return item
    if item is None or isinstance(item, (bool, dict, list)):
        return json.dumps(item)
    return str(item)


def coerce_content(value: Any) -> str:
    """Turn whatever the model sent as file content into a string."""
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return "\n".join(_stringify_item(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value, indent=2)
    if isinstance(value, bool):
        return json.dumps(value)
    return str(value)


def _required_path(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError("path must be a non-empty string")
    return value.strip()


class WriteFileInput(BaseModel):
    path: str
    content: str = ""
    skip_validation: bool = Field(default=False, alias="skipValidation")
    model_config = ConfigDict(extra='ignore', frozen=True, strict=True, populate_by_name=True)

    @field_validator("path", mode="before")
    @classmethod
    def _check_path(cls, value: Any) -> str:
        return _required_path(value)

    @field_validator("content", mode="before")
    @classmethod
    def _coerce_content(cls, value: Any) -> str:
        return coerce_content(value)

    @field_validator("skip_validation", mode="before")
    @classmethod
    def _only_literal_true(cls, value: Any) -> bool:
        return value is True


class ReadFileInput(BaseModel):
    path: str
    model_config = ConfigDict(extra='ignore', frozen=True, strict=True)

    @field_validator("path", mode="before")
    @classmethod
    def _check_path(cls, value: Any) -> str:
        return _required_path(value)


class RunCommandInput(BaseModel):
    command: str
    cwd: Optional[str] = None
    model_config = ConfigDict(extra='ignore', frozen=True, strict=True)

    @field_validator("command", mode="before")
    @classmethod
    def _check_command(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("command must be a non-empty string")
        return value.strip()

    @field_validator("cwd", mode="before")
    @classmethod
    def _check_cwd(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        if not isinstance(value, str):
            raise ValueError("cwd must be a string")
        return value.strip() or None


class ListFilesInput(BaseModel):
    path: Optional[str] = None
    recursive: Optional[bool] = None
    model_config = ConfigDict(extra='ignore', frozen=True, strict=True)

    @field_validator("path", mode="before")
    @classmethod
    def _check_path(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        if not isinstance(value, str):
            raise ValueError("path must be a string")
        return value.strip() or None

    @field_validator("recursive", mode="before")
    @classmethod
    def _check_recursive(cls, value: Any) -> Optional[bool]:
        if value is not None and not isinstance(value, bool):
            raise ValueError("recursive must be a boolean")
        return value


class ParsedCommand(BaseModel):
    command_name: str
    arguments: List[str] = Field(default_factory=list)
    is_piped: bool = False
    pipeline_segments: List[str] = Field(default_factory=list)
    stages: List[List[str]] = Field(default_factory=list)
    model_config = ConfigDict(frozen=True)

    @property
    def pipeline(self) -> str:
        """The validated pipeline for `sh -c`, every token quoted so the shell expands nothing."""
        return " | ".join(shlex.join(stage) for stage in self.stages)

    @property
    def argv(self) -> List[str]:
        return [self.command_name, *self.arguments]


class ToolResult(BaseModel):
    success: bool
    output: str = ""
    error: Optional[str] = None
    model_config = ConfigDict(frozen=True)


class ValidationResult(BaseModel):
    valid: bool = True
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
