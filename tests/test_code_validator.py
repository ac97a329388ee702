# tests/test_code_validator.py
import pytest

from agent_sandbox import code_validator
from agent_sandbox.code_validator import (
    check_balanced_delimiters,
    check_strings,
    check_template_literals,
    should_validate,
    validate,
)


@pytest.mark.parametrize("path, expected", [
    ("src/main.js", True), ("App.TSX", True), ("lib.mjs", True), ("package.json", True),
    ("pyproject.toml", True), ("script.py", True),
    ("index.html", False), ("style.css", False), ("README", False), ("shader.glsl", False),
])
def test_should_validate(path, expected):
    assert should_validate(path) is expected

def test_unknown_extension_is_valid():
    result = validate("index.html", "<div>{{{")
    assert result.valid
    assert result.errors == []


class TestJson:

    def test_valid(self):
        assert validate("a.json", '{"a":1}').valid

    def test_invalid(self):
        result = validate("a.json", '{"a":}')
        assert not result.valid
        assert len(result.errors) == 1
        assert result.errors[0].startswith("JSON syntax error: ")

    def test_empty_file_is_invalid(self):
        assert not validate("package.json", "").valid


class TestPythonAndToml:

    def test_python(self):
        assert validate("a.py", "def f():\n    return 1\n").valid
        result = validate("a.py", "def f(:\n")
        assert result.errors[0].startswith("Python syntax error: ")
        assert "at line 1" in result.errors[0]

    def test_toml(self):
        assert validate("a.toml", '[tool]\nname = "x"\n').valid
        assert validate("a.toml", "name = \n").errors[0].startswith("TOML syntax error: ")


class TestBalancedDelimiters:

    def test_nested_is_valid(self):
        assert check_balanced_delimiters("{ [ ( ) ] }") == []

    def test_wrong_closer_is_one_error(self):
        errors = check_balanced_delimiters("{ [ ) ] }")
        assert errors == [
            "Mismatched delimiter: expected ']' to close '[' from line 1, but found ')' at line 1"
        ]

    def test_unclosed_opener(self):
        assert check_balanced_delimiters("{") == ["Unclosed '{' from line 1 - missing '}'"]

    def test_unexpected_closer(self):
        assert check_balanced_delimiters("}") == ["Unexpected '}' at line 1 - no matching '{'"]

    def test_wrong_closer_unwinds_to_deeper_opener(self):
        errors = check_balanced_delimiters("function f() {\n  if (x) {\n    g(\n}\n")
        assert errors == [
            "Mismatched delimiter: expected ')' to close '(' from line 3, but found '}' at line 4",
            "Unclosed '{' from line 1 - missing '}'",
        ]

    @pytest.mark.parametrize("content", [
        'const s = "{";',
        "const s = '(';",
        "const s = `${a} [`;",
        "// }\nconst a = 1;",
        "/* ) ] } */ const a = [1];",
        'const s = "\\"}";',
    ])
    def test_ignores_strings_and_comments(self, content):
        assert check_balanced_delimiters(content) == []

    def test_line_numbers(self):
        errors = check_balanced_delimiters("const a = [\n1,\n2\n")
        assert errors == ["Unclosed '[' from line 1 - missing ']'"]


class TestStrings:

    def test_closed_strings(self):
        assert check_strings("const a = 'x';\nconst b = \"y\";") == ([], [])

    def test_unclosed_string_is_error(self):
        errors, warnings = check_strings("const a = 'oops;\n")
        assert errors == ["Unclosed string \"'\" at line 1, column 11"]
        assert warnings == []

    def test_long_unclosed_string_is_warning(self):
        errors, warnings = check_strings("const a = '" + "x" * 150)
        assert errors == []
        assert warnings == ["Possibly unclosed string starting at line 1, column 11"]

    def test_comment_lines_are_skipped(self):
        assert check_strings("// it's fine\n/* don't */\n * won't\n") == ([], [])

    def test_trailing_comment_is_ignored(self):
        assert check_strings("const a = 1; // it's fine") == ([], [])

    def test_apostrophe_in_template_literal(self):
        assert check_strings("const a = `it's\nstill ${b}'s`;") == ([], [])


class TestTemplateLiterals:

    def test_closed(self):
        assert check_template_literals("const a = `x ${y}`;") == []

    def test_unclosed(self):
        assert check_template_literals("const a = 1;\nconst b = `oops;\n") == [
            "Unclosed template literal starting at line 2"
        ]

    def test_backtick_in_comment_or_string(self):
        assert check_template_literals("// `\nconst a = '`';\n/* ` */") == []


class TestJavascript:

    def test_valid_module(self):
        content = (
            "import * as THREE from 'three';\n"
            "const scene = new THREE.Scene();\n"
            "function animate() {\n"
            "  requestAnimationFrame(animate);\n"
            "  renderer.render(scene, camera);\n"
            "}\n"
            "const msg = `frame ${count}`;\n"
        )
        result = validate("src/main.js", content)
        assert result.valid
        assert result.errors == []

    def test_truncated_module_collects_all_errors(self):
        result = validate("src/main.ts", "function f() {\n  const s = 'abc;\n")
        assert not result.valid
        assert "Unclosed '{' from line 1 - missing '}'" in result.errors
        assert any(e.startswith("Unclosed string") for e in result.errors)

    def test_warnings_do_not_block(self):
        result = code_validator.validate_javascript("const a = '" + "x" * 150)
        assert result.valid
        assert result.warnings
