# agent_sandbox/input_validators.py
"""
Per-operation checks for the loosely-typed arguments a model sends with a tool call.

File content is coerced leniently (the model often drifts in shape there);
paths, commands and flags are structural and must be exactly right.
"""
from collections.abc import Mapping
from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError

from agent_sandbox.data_models import ListFilesInput, ReadFileInput, RunCommandInput, WriteFileInput
from agent_sandbox.errors import InvalidInputError, Outcome

ModelT = TypeVar("ModelT", bound=BaseModel)

_VALUE_ERROR_PREFIX = "Value error, "


def describe_validation_error(exc: ValidationError) -> str:
    details = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ())) or "input"
        if err.get("type") == "missing":
            details.append(f"{field} is required")
            continue
        message = str(err.get("msg", "invalid value"))
        if message.startswith(_VALUE_ERROR_PREFIX):
            message = message[len(_VALUE_ERROR_PREFIX):]
        details.append(message if message.startswith(field) else f"{field}: {message}")
    return "Invalid input: " + "; ".join(details)


def _validate(model_cls: Type[ModelT], raw_input: Any) -> Outcome[ModelT]:
    if not isinstance(raw_input, Mapping):
        return Outcome.failure(InvalidInputError("Invalid input: expected object"))
    try:
        return Outcome.success(model_cls.model_validate(dict(raw_input)))
    except ValidationError as e:
        return Outcome.failure(InvalidInputError(describe_validation_error(e)))


def validate_write_file_input(raw_input: Any) -> Outcome[WriteFileInput]:
    return _validate(WriteFileInput, raw_input)


def validate_read_file_input(raw_input: Any) -> Outcome[ReadFileInput]:
    return _validate(ReadFileInput, raw_input)


def validate_run_command_input(raw_input: Any) -> Outcome[RunCommandInput]:
    return _validate(RunCommandInput, raw_input)


def validate_list_files_input(raw_input: Any) -> Outcome[ListFilesInput]:
    return _validate(ListFilesInput, raw_input)
