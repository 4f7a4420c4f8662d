from __future__ import annotations

import shlex
import shutil
import subprocess

import pytest

from vim_runner.runner.shell import (
    command_word,
    quote_args,
    shell_quote,
    split_args,
    with_args,
)


def test_shell_quote_wraps_in_single_quotes() -> None:
    assert shell_quote("/tmp/scratch/hello.py") == "'/tmp/scratch/hello.py'"


def test_shell_quote_escapes_embedded_quote() -> None:
    assert shell_quote("it's") == "'it'\\''s'"


@pytest.mark.parametrize(
    "value",
    ["it's", "two words", "$(rm -rf /)", "a;b|c&d", "''", "back\\slash", ""],
)
def test_shell_quote_round_trips_through_posix_parser(value: str) -> None:
    assert shlex.split(shell_quote(value)) == [value]


@pytest.mark.skipif(shutil.which("sh") is None, reason="needs a POSIX shell")
def test_shell_quote_round_trips_through_real_shell() -> None:
    value = "don't $HOME `x` \"q\""
    completed = subprocess.run(
        ["sh", "-c", f"printf %s {shell_quote(value)}"],
        capture_output=True,
        text=True,
        check=True,
    )
    assert completed.stdout == value


def test_command_word_leaves_safe_names_bare() -> None:
    assert command_word("python3") == "python3"
    assert command_word("/usr/bin/g++-13") == "/usr/bin/g++-13"
    assert command_word("my tool") == "'my tool'"


def test_split_args_keeps_user_word_boundaries() -> None:
    assert split_args('--name "Ada Lovelace" -v') == ["--name", "Ada Lovelace", "-v"]
    assert split_args("   ") == []


def test_split_args_falls_back_to_single_word_on_unbalanced_quote() -> None:
    assert split_args("it's broken") == ["it's broken"]


def test_quote_args_neutralizes_metacharacters() -> None:
    assert quote_args("x; rm -rf ~") == "'x;' 'rm' '-rf' '~'"


def test_with_args_omits_trailing_space_when_empty() -> None:
    assert with_args("make", "") == "make"
    assert with_args("make", "a b") == "make 'a' 'b'"
