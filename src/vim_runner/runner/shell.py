"""POSIX shell quoting helpers used when composing command lines."""

from __future__ import annotations

import re
import shlex
from typing import Iterable

_SAFE_WORD = re.compile(r"[\w@%+=:,./-]+")


def shell_quote(value: object) -> str:
    """Wrap ``value`` in single quotes, escaping embedded quotes as ``'\\''``."""

    return "'" + str(value).replace("'", "'\\''") + "'"


def command_word(value: str) -> str:
    """Emit a configured executable name bare when it is shell-safe."""

    if _SAFE_WORD.fullmatch(value):
        return value
    return shell_quote(value)


def split_args(raw: str) -> list[str]:
    """Split user-typed arguments with POSIX word rules.

    Text that cannot be split (e.g. an unbalanced quote) is kept as a single
    word rather than rejected.
    """

    text = (raw or "").strip()
    if not text:
        return []
    try:
        return shlex.split(text, posix=True)
    except ValueError:
        return [text]


def quote_args(raw: str) -> str:
    return join_quoted(split_args(raw))


def join_quoted(words: Iterable[str]) -> str:
    return " ".join(shell_quote(word) for word in words)


def with_args(command: str, raw_args: str) -> str:
    quoted = quote_args(raw_args)
    return f"{command} {quoted}" if quoted else command


__all__ = [
    "shell_quote",
    "command_word",
    "split_args",
    "quote_args",
    "join_quoted",
    "with_args",
]
