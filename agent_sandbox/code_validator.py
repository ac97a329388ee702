# agent_sandbox/code_validator.py
"""
Syntax checks run on generated code before it is written to disk.

These are heuristic lexers, not parsers: the goal is to catch truncated or
obviously malformed output from the model (unbalanced braces, strings cut off
mid-line, a template literal never closed), not to prove the code compiles.
JSON, TOML and Python are checked with real parsers since those are cheap.
"""
import ast
import json
import os
from typing import Dict, List, Optional, Tuple

import toml

from agent_sandbox.data_models import ValidationResult

JAVASCRIPT_EXTENSIONS = frozenset({".js", ".ts", ".jsx", ".tsx", ".mjs", ".cjs"})
VALIDATABLE_EXTENSIONS = JAVASCRIPT_EXTENSIONS | {".json", ".toml", ".py"}

# An "unclosed" string with a tail longer than this is more likely a lexer
# false positive than a truncated literal, so it is only a warning.
LONG_STRING_WARNING_THRESHOLD = 100

PAIRS: Dict[str, str] = {"{": "}", "[": "]", "(": ")"}
CLOSERS: Dict[str, str] = {"}": "{", "]": "[", ")": "("}
QUOTES = ("'", '"')


def _extension(file_path: str) -> str:
    return os.path.splitext(file_path)[1].lower()


def should_validate(file_path: str) -> bool:
    return _extension(file_path) in VALIDATABLE_EXTENSIONS


def validate(file_path: str, content: str) -> ValidationResult:
    ext = _extension(file_path)
    if ext == ".json":
        return validate_json(content)
    if ext == ".toml":
        return validate_toml(content)
    if ext == ".py":
        return validate_python(content)
    if ext in JAVASCRIPT_EXTENSIONS:
        return validate_javascript(content)
    return ValidationResult(valid=True)


def validate_json(content: str) -> ValidationResult:
    errors: List[str] = []
    try:
        json.loads(content)
    except json.JSONDecodeError as e:
        errors.append(f"JSON syntax error: {e}")
    except (TypeError, ValueError) as e:
        errors.append(f"JSON parsing failed: {e}")
    return ValidationResult(valid=not errors, errors=errors)


def validate_toml(content: str) -> ValidationResult:
    errors: List[str] = []
    try:
        toml.loads(content)
    except toml.TomlDecodeError as e:
        errors.append(f"TOML syntax error: {e}")
    return ValidationResult(valid=not errors, errors=errors)


def validate_python(content: str) -> ValidationResult:
    errors: List[str] = []
    try:
        ast.parse(content)
    except SyntaxError as e:
        errors.append(f"Python syntax error: {e.msg} at line {e.lineno}")
    except ValueError as e:
        errors.append(f"Python parsing failed: {e}")
    return ValidationResult(valid=not errors, errors=errors)


def validate_javascript(content: str) -> ValidationResult:
    errors: List[str] = []
    warnings: List[str] = []

    errors.extend(check_balanced_delimiters(content))

    string_errors, string_warnings = check_strings(content)
    errors.extend(string_errors)
    warnings.extend(string_warnings)

    errors.extend(check_template_literals(content))

    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)


def _find_opener(stack: List[Tuple[str, int]], opener: str) -> Optional[int]:
    for index in range(len(stack) - 1, -1, -1):
        if stack[index][0] == opener:
            return index
    return None


def check_balanced_delimiters(content: str) -> List[str]:
    """Stack-match {} [] (), skipping comments, strings and template literals."""
    errors: List[str] = []
    stack: List[Tuple[str, int]] = []

    in_string: Optional[str] = None
    in_template = False
    in_line_comment = False
    in_block_comment = False
    line = 1
    i = 0
    length = len(content)

    while i < length:
        char = content[i]
        next_char = content[i + 1] if i + 1 < length else ""

        if char == "\n":
            line += 1
            in_line_comment = False
            in_string = None  # quoted strings cannot span lines
            i += 1
            continue

        code = not (in_string or in_template or in_line_comment or in_block_comment)
        if code and char == "/" and next_char == "/":
            in_line_comment = True
            i += 2
            continue
        if code and char == "/" and next_char == "*":
            in_block_comment = True
            i += 2
            continue
        if in_block_comment and char == "*" and next_char == "/":
            in_block_comment = False
            i += 2
            continue
        if in_line_comment or in_block_comment:
            i += 1
            continue

        if (in_string or in_template) and char == "\\":
            if next_char == "\n":
                line += 1
            i += 2
            continue

        if char == "`" and not in_string:
            in_template = not in_template
            i += 1
            continue
        if char in QUOTES and not in_template:
            if in_string == char:
                in_string = None
            elif not in_string:
                in_string = char
            i += 1
            continue
        if in_string or in_template:
            i += 1
            continue

        if char in PAIRS:
            stack.append((char, line))
        elif char in CLOSERS:
            opener = CLOSERS[char]
            if not stack:
                errors.append(f"Unexpected '{char}' at line {line} - no matching '{opener}'")
            elif stack[-1][0] == opener:
                stack.pop()
            else:
                top_char, top_line = stack[-1]
                errors.append(
                    f"Mismatched delimiter: expected '{PAIRS[top_char]}' to close '{top_char}' "
                    f"from line {top_line}, but found '{char}' at line {line}"
                )
                # Close back to a matching opener if there is one, otherwise drop the stray closer.
                match_index = _find_opener(stack, opener)
                if match_index is not None:
                    del stack[match_index:]
        i += 1

    for char, opened_line in stack:
        errors.append(f"Unclosed '{char}' from line {opened_line} - missing '{PAIRS[char]}'")

    return errors


def check_strings(content: str) -> Tuple[List[str], List[str]]:
    """Report single/double-quoted strings still open at the end of a line."""
    errors: List[str] = []
    warnings: List[str] = []
    in_template = False

    for line_index, line in enumerate(content.split("\n")):
        line_number = line_index + 1
        trimmed = line.strip()
        if not in_template and trimmed.startswith(("//", "/*", "*")):
            continue

        in_string: Optional[str] = None
        string_start = -1
        i = 0
        while i < len(line):
            char = line[i]
            if (in_string or in_template) and char == "\\":
                i += 2
                continue
            if char == "`" and not in_string:
                in_template = not in_template
            elif in_template:
                pass
            elif char in QUOTES:
                if in_string == char:
                    in_string = None
                elif not in_string:
                    in_string = char
                    string_start = i
            elif not in_string and char == "/" and line[i + 1:i + 2] == "/":
                break
            i += 1

        if in_string:
            remaining = line[string_start:]
            if len(remaining) > LONG_STRING_WARNING_THRESHOLD:
                warnings.append(
                    f"Possibly unclosed string starting at line {line_number}, column {string_start + 1}"
                )
            else:
                errors.append(f"Unclosed string {in_string!r} at line {line_number}, column {string_start + 1}")

    return errors, warnings


def check_template_literals(content: str) -> List[str]:
    errors: List[str] = []

    in_template = False
    template_start_line = 0
    line = 1
    in_line_comment = False
    in_block_comment = False
    in_string: Optional[str] = None
    i = 0
    length = len(content)

    while i < length:
        char = content[i]
        next_char = content[i + 1] if i + 1 < length else ""

        if char == "\n":
            line += 1
            in_line_comment = False
            in_string = None
            i += 1
            continue

        code = not (in_string or in_template or in_line_comment or in_block_comment)
        if code and char == "/" and next_char == "/":
            in_line_comment = True
        elif code and char == "/" and next_char == "*":
            in_block_comment = True
            i += 1
        elif in_block_comment and char == "*" and next_char == "/":
            in_block_comment = False
            i += 1
        elif in_line_comment or in_block_comment:
            pass
        elif (in_string or in_template) and char == "\\":
            if next_char == "\n":
                line += 1
            i += 1
        elif char in QUOTES and not in_template:
            if in_string == char:
                in_string = None
            elif not in_string:
                in_string = char
        elif in_string:
            pass
        elif char == "`":
            if in_template:
                in_template = False
            else:
                in_template = True
                template_start_line = line
        i += 1

    if in_template:
        errors.append(f"Unclosed template literal starting at line {template_start_line}")

    return errors
