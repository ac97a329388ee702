# tests/test_path_guard.py
import os
from unittest.mock import patch

import pytest

from agent_sandbox.errors import ErrorKind, InvalidInputError, PathTraversalError
from agent_sandbox.path_guard import PathGuard


@pytest.fixture
def guard(tmp_path):
    return PathGuard(tmp_path)


def test_root_is_resolved(tmp_path, guard):
    assert guard.root == tmp_path.resolve()

@pytest.mark.parametrize("raw", ["a.txt", "src/main.js", "./src/../a.txt", "src/"])
def test_relative_paths_inside_root_are_accepted(guard, raw):
    outcome = guard.check(raw)
    assert outcome.ok
    assert outcome.value == guard.root / os.path.normpath(raw)

@pytest.mark.parametrize("raw", [".", "", "src/.."])
def test_root_itself_is_accepted(guard, raw):
    outcome = guard.check(raw)
    assert outcome.ok
    assert outcome.value == guard.root

@pytest.mark.parametrize("raw", ["../x", "../../etc/passwd", "src/../../x", "/etc/passwd"])
def test_paths_outside_root_are_rejected(guard, raw):
    outcome = guard.check(raw)
    assert not outcome.ok
    assert isinstance(outcome.error, PathTraversalError)
    assert outcome.error.kind is ErrorKind.PATH_TRAVERSAL
    assert outcome.error.message == f'Path traversal not allowed: "{raw}" resolves outside working directory'

def test_absolute_path_inside_root_is_accepted(guard):
    inside = guard.root / "deep" / "file.txt"
    assert guard.check(str(inside)).value == inside

def test_sibling_with_common_prefix_is_rejected(tmp_path):
    root = tmp_path / "project"
    root.mkdir()
    guard = PathGuard(root)
    assert not guard.check(str(tmp_path / "project-evil" / "x")).ok

def test_null_byte_is_invalid_input(guard):
    outcome = guard.check("a\x00b")
    assert isinstance(outcome.error, InvalidInputError)

def test_unencodable_path_is_invalid_input(guard):
    outcome = guard.check("a\ud800.txt")
    assert isinstance(outcome.error, InvalidInputError)
    assert outcome.error.message.startswith("Invalid input")

def test_realpath_failure_is_invalid_input(guard):
    with patch("agent_sandbox.path_guard.os.path.realpath", side_effect=ValueError("bad path")):
        outcome = guard.check("a.txt")
    assert isinstance(outcome.error, InvalidInputError)
    assert "bad path" in outcome.error.message

def test_resolve_raises(guard):
    with pytest.raises(PathTraversalError):
        guard.resolve("../outside")
    assert guard.resolve("inside.txt") == guard.root / "inside.txt"

def test_is_within(guard):
    assert guard.is_within(guard.root)
    assert guard.is_within(guard.root / "a" / "b")
    assert not guard.is_within(guard.root.parent)

def test_relative(guard):
    assert guard.relative(guard.root / "src" / "main.js") == os.path.join("src", "main.js")

@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
class TestSymlinks:

    @pytest.fixture
    def linked_root(self, tmp_path):
        root = tmp_path / "root"
        outside = tmp_path / "outside"
        root.mkdir()
        outside.mkdir()
        (outside / "secret.txt").write_text("secret")
        os.symlink(outside, root / "escape")
        return root

    def test_link_leaving_root_is_rejected(self, linked_root):
        outcome = PathGuard(linked_root).check("escape/secret.txt")
        assert isinstance(outcome.error, PathTraversalError)
        assert "links outside working directory" in outcome.error.message

    def test_link_allowed_when_resolution_disabled(self, linked_root):
        assert PathGuard(linked_root, resolve_symlinks=False).check("escape/secret.txt").ok
