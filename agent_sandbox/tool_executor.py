# agent_sandbox/tool_executor.py
"""
Executes the four tools the model can call: write_file, read_file,
list_files and run_command.

Every request is validated, every path is checked against the working
directory, and every command is checked against the allowlist before
anything touches the disk or spawns a process. `execute()` never raises:
failures come back as `ToolResult(success=False, error=...)` so the model
can read the message and correct itself.
"""
import logging
import os
import signal
import subprocess
import threading
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol, Union

from agent_sandbox import code_validator
from agent_sandbox.command_parser import parse_command
from agent_sandbox.config_utils import SandboxSettings
from agent_sandbox.data_models import ParsedCommand, ToolResult
from agent_sandbox.errors import (
    ExecutionFailedError,
    FileIOError,
    PathTraversalError,
    ToolError,
    UserDeclinedError,
    ValidationFailedError,
)
from agent_sandbox.file_utils import read_local_file, write_local_file
from agent_sandbox.input_validators import (
    validate_list_files_input,
    validate_read_file_input,
    validate_run_command_input,
    validate_write_file_input,
)
from agent_sandbox.path_guard import PathGuard

logger = logging.getLogger(__name__)

SKIPPED_DIRECTORY_NAMES = frozenset({"node_modules", "__pycache__", "venv"})
DECLINED_MESSAGE = "User declined to run this command"
CONFIRM_PROMPT = "Run this command?"
READ_CHUNK_SIZE = 8192
READER_JOIN_TIMEOUT_SECONDS = 5.0


class ToolReporter(Protocol):
    def tool_call(self, tool_name: str, detail: str) -> None: ...

    def tool_result(self, success: bool, message: str = "") -> None: ...

    def warning(self, message: str) -> None: ...


ConfirmCallback = Callable[[str], bool]


class _StreamCollector(threading.Thread):
    """Drains one child stream, keeping at most `limit` bytes and discarding the rest."""

    def __init__(self, stream, limit: int):
        super().__init__(daemon=True)
        self._stream = stream
        self._limit = limit
        self._chunks: List[bytes] = []
        self._size = 0
        self.truncated = False

    def run(self):
        try:
            for chunk in iter(lambda: self._stream.read(READ_CHUNK_SIZE), b""):
                remaining = self._limit - self._size
                if remaining > 0:
                    kept = chunk[:remaining]
                    self._chunks.append(kept)
                    self._size += len(kept)
                if len(chunk) > max(remaining, 0):
                    self.truncated = True
        finally:
            self._stream.close()

    def text(self) -> str:
        text = b"".join(self._chunks).decode("utf-8", errors="replace")
        if self.truncated:
            text += f"\n... (output truncated after {self._limit} bytes)"
        return text


def _kill_process_tree(process: subprocess.Popen):
    if os.name == "posix":
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass  # already exited
    else:
        process.kill()


def _format_command_output(stdout: str, stderr: str) -> str:
    return stdout + (f"\nStderr: {stderr}" if stderr else "")


class ToolExecutor:
    def __init__(
        self,
        working_directory: Union[str, Path],
        reporter: ToolReporter,
        confirm: ConfirmCallback,
        settings: Optional[SandboxSettings] = None,
    ):
        self.settings = settings or SandboxSettings()
        self.path_guard = PathGuard(working_directory, resolve_symlinks=self.settings.resolve_symlinks)
        self.working_directory = self.path_guard.root
        self.policy = self.settings.command_policy()
        self.reporter = reporter
        self.confirm = confirm
        self._created_files: Dict[str, None] = {}
        self._handlers: Dict[str, Callable[[Any], ToolResult]] = {
            "write_file": self._write_file,
            "read_file": self._read_file,
            "run_command": self._run_command,
            "list_files": self._list_files,
        }

    def execute(self, tool_name: str, raw_input: Any) -> ToolResult:
        handler = self._handlers.get(tool_name)
        if handler is None:
            logger.debug("Rejected unknown tool %r", tool_name)
            return ToolResult(success=False, error=f"Unknown tool: {tool_name}")
        logger.debug("Executing %s with %r", tool_name, raw_input)
        try:
            return handler(raw_input)
        except Exception as e:
            logger.exception("Unexpected failure in %s", tool_name)
            return ToolResult(success=False, error=f"Unexpected error in {tool_name}: {type(e).__name__}: {e}")

    def get_created_files(self) -> List[str]:
        return list(self._created_files)

    def clear_created_files(self):
        self._created_files.clear()

    def _fail(self, error: ToolError, output: str = "") -> ToolResult:
        message = error.message
        logger.debug("Tool failed: %s", message)
        self.reporter.tool_result(False, message)
        return ToolResult(success=False, output=output, error=message)

    @staticmethod
    def _display_value(raw_input: Any, key: str, fallback: str) -> str:
        if isinstance(raw_input, dict):
            value = raw_input.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
        return fallback

    # --- write_file ---

    def _write_file(self, raw_input: Any) -> ToolResult:
        self.reporter.tool_call("write_file", f"Writing: {self._display_value(raw_input, 'path', 'unknown')}")
        try:
            request = validate_write_file_input(raw_input).unwrap()
            full_path = self.path_guard.resolve(request.path)

            warnings: List[str] = []
            if not request.skip_validation and code_validator.should_validate(request.path):
                validation = code_validator.validate(request.path, request.content)
                if not validation.valid:
                    details = "\n".join(f"  - {e}" for e in validation.errors)
                    raise ValidationFailedError(
                        f"Syntax validation failed for {request.path}:\n{details}\n\n"
                        "Fix the syntax errors and try again."
                    )
                warnings = validation.warnings
                for warning in warnings:
                    self.reporter.warning(warning)

            try:
                write_local_file(full_path, request.content, self.settings.max_file_size_bytes)
            except (OSError, ValueError) as e:
                raise FileIOError(str(e)) from e

            relative_path = self.path_guard.relative(full_path)
            self._created_files[relative_path] = None
        except ToolError as e:
            return self._fail(e)

        self.reporter.tool_result(True)
        output = f"Successfully wrote {request.path}"
        if warnings:
            output += "\nWarnings:\n" + "\n".join(f"  - {w}" for w in warnings)
        return ToolResult(success=True, output=output)

    # --- read_file ---

    def _read_file(self, raw_input: Any) -> ToolResult:
        self.reporter.tool_call("read_file", f"Reading: {self._display_value(raw_input, 'path', 'unknown')}")
        try:
            request = validate_read_file_input(raw_input).unwrap()
            full_path = self.path_guard.resolve(request.path)
            try:
                content = read_local_file(full_path, self.settings.max_file_size_bytes)
            except FileNotFoundError as e:
                raise FileIOError(f"File not found: {request.path}") from e
            except IsADirectoryError as e:
                raise FileIOError(f"Cannot read a directory: {request.path}. Use list_files instead.") from e
            except UnicodeDecodeError as e:
                raise FileIOError(f"File is not valid UTF-8: {request.path}") from e
            except (OSError, ValueError) as e:
                raise FileIOError(str(e)) from e
        except ToolError as e:
            return self._fail(e)

        self.reporter.tool_result(True)
        return ToolResult(success=True, output=content)

    # --- run_command ---

    def _run_command(self, raw_input: Any) -> ToolResult:
        self.reporter.tool_call("run_command", f"Command: {self._display_value(raw_input, 'command', 'unknown')}")
        try:
            request = validate_run_command_input(raw_input).unwrap()
            parsed = parse_command(request.command, self.policy).unwrap()
            cwd = self.path_guard.resolve(request.cwd) if request.cwd else self.working_directory
            if not cwd.is_dir():
                raise FileIOError(f"Working directory for command does not exist: {request.cwd}")

            if not self.confirm(CONFIRM_PROMPT):
                raise UserDeclinedError(DECLINED_MESSAGE)

            return self._spawn(parsed, cwd)
        except ToolError as e:
            return self._fail(e)

    def _spawn(self, parsed: ParsedCommand, cwd: Path) -> ToolResult:
        # Pipelines need a shell; it receives the validated tokens, each one quoted.
        args = ["sh", "-c", parsed.pipeline] if parsed.is_piped else parsed.argv
        popen_kwargs: Dict[str, Any] = {
            "cwd": str(cwd),
            "stdin": subprocess.DEVNULL,
            "stdout": subprocess.PIPE,
            "stderr": subprocess.PIPE,
        }
        if os.name == "posix":
            popen_kwargs["start_new_session"] = True

        logger.debug("Spawning %r in %s", args, cwd)
        try:
            process = subprocess.Popen(args, **popen_kwargs)
        except OSError as e:
            raise ExecutionFailedError(f"Failed to start '{parsed.command_name}': {e.strerror or e}") from e

        limit = self.settings.max_output_bytes
        stdout_reader = _StreamCollector(process.stdout, limit)
        stderr_reader = _StreamCollector(process.stderr, limit)
        stdout_reader.start()
        stderr_reader.start()

        timeout = self.settings.command_timeout_seconds
        timed_out = False
        try:
            exit_code = process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            timed_out = True
            _kill_process_tree(process)
            exit_code = process.wait()
        finally:
            stdout_reader.join(READER_JOIN_TIMEOUT_SECONDS)
            stderr_reader.join(READER_JOIN_TIMEOUT_SECONDS)

        output = _format_command_output(stdout_reader.text(), stderr_reader.text())
        if timed_out:
            raise ExecutionFailedError(f"Command timed out after {timeout:g} seconds. {output}".rstrip())
        if exit_code != 0:
            self.reporter.tool_result(False, f"Exit code: {exit_code}")
            return ToolResult(
                success=False,
                output=output,
                error=f"Command failed with exit code {exit_code}. {output}",
            )

        self.reporter.tool_result(True)
        return ToolResult(success=True, output=output or "Command completed successfully")

    # --- list_files ---

    def _list_files(self, raw_input: Any) -> ToolResult:
        self.reporter.tool_call("list_files", f"Listing: {self._display_value(raw_input, 'path', '.')}")
        try:
            request = validate_list_files_input(raw_input).unwrap()
            target = self.path_guard.resolve(request.path) if request.path else self.working_directory
            entries: List[str] = []
            try:
                self._walk(target, bool(request.recursive), entries)
            except FileNotFoundError as e:
                raise FileIOError(f"Directory not found: {request.path}") from e
            except NotADirectoryError as e:
                raise FileIOError(f"Not a directory: {request.path}") from e
            except OSError as e:
                raise FileIOError(str(e)) from e
        except ToolError as e:
            return self._fail(e)

        cap = self.settings.max_listed_entries
        if len(entries) > cap:
            hidden = len(entries) - cap
            entries = entries[:cap] + [f"... ({hidden} more entries)"]

        self.reporter.tool_result(True)
        return ToolResult(success=True, output="\n".join(entries) if entries else "(empty directory)")

    def _walk(self, directory: Path, recursive: bool, entries: List[str]):
        if not self.path_guard.is_within(directory):
            raise PathTraversalError("Directory traversal not allowed")

        with os.scandir(directory) as it:
            children = sorted(it, key=lambda entry: entry.name)

        for entry in children:
            if entry.name.startswith(".") or entry.name in SKIPPED_DIRECTORY_NAMES:
                continue
            full_path = Path(entry.path)
            relative_path = self.path_guard.relative(full_path)
            if entry.is_dir():
                if not recursive:
                    entries.append(relative_path + os.sep)
                elif entry.is_symlink():
                    # Linked directories are listed, never descended into.
                    entries.append(relative_path)
                else:
                    self._walk(full_path, True, entries)
            else:
                entries.append(relative_path)
