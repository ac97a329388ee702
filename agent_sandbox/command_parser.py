# agent_sandbox/command_parser.py
"""
Turns a free-text command line into allowlisted program invocations.

Only simple pipelines are understood: the raw string is rejected outright if
it contains any shell metacharacter other than `|`, then every `|` segment is
tokenized on its own and its first token checked against the policy.
"""
from typing import List, Optional

from agent_sandbox.command_policy import CommandPolicy
from agent_sandbox.data_models import ParsedCommand
from agent_sandbox.errors import (
    CommandNotAllowedError,
    DangerousMetacharacterError,
    InvalidInputError,
    Outcome,
    UnclosedQuoteError,
)

# The pipe is deliberately absent; pipelines are split and checked stage by stage.
DANGEROUS_METACHARACTERS = frozenset(";&`$(){}[]<>!\\")
QUOTE_CHARACTERS = ("'", '"')
WHITESPACE = (" ", "\t")


def find_dangerous_metacharacter(command: str) -> Optional[str]:
    for char in command:
        if char in DANGEROUS_METACHARACTERS:
            return char
    return None


def find_control_character(command: str) -> Optional[str]:
    """Any C0 control character except tab, or DEL. `sh` treats a newline as a command separator."""
    for char in command:
        if (char < " " and char != "\t") or char == "\x7f":
            return char
    return None


def tokenize_command(segment: str) -> Outcome[List[str]]:
    """Split one pipeline segment on blanks, honouring single and double quotes."""
    tokens: List[str] = []
    current = ""
    in_quote: Optional[str] = None
    has_token = False

    for char in segment:
        if in_quote:
            if char == in_quote:
                in_quote = None
            else:
                current += char
        elif char in QUOTE_CHARACTERS:
            in_quote = char
            has_token = True  # "" is an empty argument, not nothing
        elif char in WHITESPACE:
            if has_token:
                tokens.append(current)
                current = ""
                has_token = False
        else:
            current += char
            has_token = True

    if in_quote:
        return Outcome.failure(UnclosedQuoteError("Unclosed quote in command"))
    if has_token:
        tokens.append(current)
    return Outcome.success(tokens)


def parse_command(command: str, policy: CommandPolicy) -> Outcome[ParsedCommand]:
    bad_char = find_dangerous_metacharacter(command)
    if bad_char is not None:
        return Outcome.failure(DangerousMetacharacterError(
            f"Command contains dangerous shell metacharacters: '{bad_char}'"
        ))
    bad_char = find_control_character(command)
    if bad_char is not None:
        return Outcome.failure(DangerousMetacharacterError(
            f"Command contains a control character: {bad_char!r}"
        ))
    try:
        command.encode("utf-8")
    except UnicodeEncodeError:
        return Outcome.failure(InvalidInputError("Invalid input: command is not valid UTF-8 text"))

    segments = [segment.strip() for segment in command.split("|")]
    segments = [segment for segment in segments if segment]
    if not segments:
        return Outcome.failure(InvalidInputError("Empty command"))

    tokenized: List[List[str]] = []
    for segment in segments:
        outcome = tokenize_command(segment)
        if not outcome.ok:
            return Outcome.failure(outcome.error)
        tokens = outcome.value or []
        if not tokens:
            return Outcome.failure(InvalidInputError("Empty command in pipeline"))
        if not policy.is_allowed(tokens[0]):
            return Outcome.failure(CommandNotAllowedError(
                f"Command not allowed: {tokens[0]} (in '{segment}'). "
                f"Allowed commands: {policy.describe()}"
            ))
        tokenized.append(tokens)

    first = tokenized[0]
    return Outcome.success(ParsedCommand(
        command_name=first[0],
        arguments=first[1:],
        is_piped=len(segments) > 1,
        pipeline_segments=segments,
        stages=tokenized,
    ))
