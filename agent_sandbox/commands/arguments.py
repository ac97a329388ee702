# agent_sandbox/commands/arguments.py
from typing import Iterable, List, Optional


def match_command(user_input: str, names: Iterable[str]) -> Optional[str]:
    """
    Returns the text after the command word when user_input starts with one of
    names, or None when it is some other input.

    The command word is compared case-insensitively and must be a whole word:
    "/settings" is not "/set". The returned text keeps its inner spacing and
    quotes, only the ends are stripped.
    """
    parts = user_input.strip().split(maxsplit=1)
    if not parts or parts[0].lower() not in names:
        return None
    return parts[1].strip() if len(parts) > 1 else ""


def split_arguments(args_text: str, maxsplit: int = -1) -> List[str]:
    return args_text.split(maxsplit=maxsplit) if args_text else []
