# agent_sandbox/command_policy.py
from typing import Iterable, Optional, Tuple

# Executable names run_command may launch, grouped by purpose.
DEFAULT_ALLOWED_COMMANDS: Tuple[str, ...] = (
    # Package managers
    "npm", "npx", "pnpm", "yarn", "bun",
    # Build tools & runtimes
    "node", "tsc", "vite", "esbuild", "rollup", "webpack",
    # Version control
    "git",
    # File operations
    "mkdir", "touch", "rm", "cp", "mv", "chmod", "ln",
    # File inspection
    "cat", "ls", "pwd", "head", "tail", "wc", "file", "stat",
    # Search and text processing
    "grep", "find", "sed", "awk", "sort", "uniq", "diff", "tr", "cut",
    # System utilities
    "echo", "which", "whereis", "basename", "dirname", "realpath",
    # Archive tools
    "tar", "zip", "unzip", "gzip", "gunzip",
    # Testing
    "jest", "vitest", "mocha", "playwright", "cypress", "pytest",
)


class CommandPolicy:
    """Immutable allowlist of executable names."""

    def __init__(self, allowed_commands: Optional[Iterable[str]] = None):
        names = DEFAULT_ALLOWED_COMMANDS if allowed_commands is None else allowed_commands
        ordered = []
        for name in names:
            name = str(name).strip()
            if name and name not in ordered:
                ordered.append(name)
        self._ordered: Tuple[str, ...] = tuple(ordered)
        self._allowed = frozenset(ordered)

    @property
    def allowed_commands(self) -> Tuple[str, ...]:
        return self._ordered

    def is_allowed(self, command_name: str) -> bool:
        return command_name in self._allowed

    def describe(self) -> str:
        return ", ".join(self._ordered)

    def __contains__(self, command_name: object) -> bool:
        return command_name in self._allowed

    def __len__(self) -> int:
        return len(self._ordered)
