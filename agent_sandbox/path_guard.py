# agent_sandbox/path_guard.py
import os
from pathlib import Path
from typing import Union

from agent_sandbox.errors import InvalidInputError, Outcome, PathTraversalError

PathLike = Union[str, "os.PathLike[str]"]


class PathGuard:
    """
    Keeps every path argument inside a fixed working directory.

    Paths are joined to the root, lexically normalized and prefix-checked
    against `root + os.sep`. With `resolve_symlinks` the canonical target is
    checked as well, so a link inside the sandbox cannot point outside it.
    """

    def __init__(self, root: PathLike, resolve_symlinks: bool = True):
        self.root = Path(root).resolve()
        self.resolve_symlinks = resolve_symlinks
        self._root_str = os.path.normcase(str(self.root))
        self._root_prefix = self._root_str if self._root_str.endswith(os.sep) else self._root_str + os.sep

    def is_within(self, path: PathLike) -> bool:
        normalized = os.path.normcase(os.path.normpath(os.fspath(path)))
        return normalized == self._root_str or normalized.startswith(self._root_prefix)

    def check(self, input_path: PathLike) -> Outcome[Path]:
        raw = os.fspath(input_path)
        if "\x00" in raw:
            return Outcome.failure(InvalidInputError("Invalid input: path contains a null byte"))
        try:
            os.fsencode(raw)
        except UnicodeError:
            return Outcome.failure(InvalidInputError("Invalid input: path is not encodable for this file system"))

        normalized = os.path.normpath(os.path.join(str(self.root), raw))
        if not self.is_within(normalized):
            return Outcome.failure(PathTraversalError(
                f'Path traversal not allowed: "{raw}" resolves outside working directory'
            ))
        try:
            canonical = os.path.realpath(normalized) if self.resolve_symlinks else normalized
        except (ValueError, OSError) as e:
            return Outcome.failure(InvalidInputError(f"Invalid input: cannot resolve path \"{raw}\": {e}"))
        if not self.is_within(canonical):
            return Outcome.failure(PathTraversalError(
                f'Path traversal not allowed: "{raw}" links outside working directory'
            ))
        return Outcome.success(Path(normalized))

    def resolve(self, input_path: PathLike) -> Path:
        """Like check(), but raises the ToolError instead of returning it."""
        return self.check(input_path).unwrap()

    def relative(self, path: PathLike) -> str:
        return os.path.relpath(os.fspath(path), str(self.root))
