from __future__ import annotations

import os
import shutil
import subprocess

import pytest

from conftest import FakeHost, write

from vim_runner.host import LocalSystem
from vim_runner.runner import RootResolver


def make_resolver(host: FakeHost) -> RootResolver:
    return RootResolver(host)


def test_vcs_root_three_levels_up_wins_over_file_dir(tmp_path) -> None:
    repo = tmp_path / "repo"
    source = write(repo / "a" / "b" / "c" / "main.cpp")
    host = FakeHost(vcs_root=str(repo))

    assert make_resolver(host).resolve(source) == str(repo)
    argv, cwd = host.probes[0]
    assert argv == ("git", "rev-parse", "--show-toplevel")
    assert cwd == str(repo / "a" / "b" / "c")


def test_vcs_root_is_preferred_over_closer_marker(tmp_path) -> None:
    write(tmp_path / "pkg" / "pyproject.toml")
    source = write(tmp_path / "pkg" / "mod.py")
    host = FakeHost(vcs_root=str(tmp_path))

    assert make_resolver(host).resolve(source) == str(tmp_path)


def test_vcs_root_naming_missing_directory_is_ignored(tmp_path) -> None:
    write(tmp_path / "Cargo.toml")
    source = write(tmp_path / "src" / "main.c")
    host = FakeHost(vcs_root=str(tmp_path / "gone"))

    assert make_resolver(host).resolve(source) == str(tmp_path)


def test_closest_marker_directory_wins(tmp_path) -> None:
    write(tmp_path / "CMakeLists.txt")
    write(tmp_path / "sub" / "go.mod")
    source = write(tmp_path / "sub" / "deep" / "main.go")

    assert make_resolver(FakeHost()).resolve(source) == str(tmp_path / "sub")


@pytest.mark.parametrize(
    "marker",
    ["Makefile", "CMakeLists.txt", "pyproject.toml", "package.json", "go.mod", "Cargo.toml"],
)
def test_every_marker_is_recognized(tmp_path, marker: str) -> None:
    write(tmp_path / "proj" / marker)
    source = write(tmp_path / "proj" / "x" / "file.txt")

    assert make_resolver(FakeHost()).resolve(source) == str(tmp_path / "proj")


def test_falls_back_to_file_directory(tmp_path) -> None:
    source = str(tmp_path / "scratch" / "hello.py")

    resolver = RootResolver(FakeHost(), markers=("no-such-marker-file",))

    assert resolver.resolve(source) == str(tmp_path / "scratch")


def test_marker_walk_stops_at_filesystem_root() -> None:
    resolver = RootResolver(FakeHost(), markers=("no-such-marker-file",))

    assert resolver.marker_root(os.path.abspath(os.sep)) is None


def test_probe_failure_never_raises(tmp_path) -> None:
    resolver = RootResolver(
        LocalSystem(), vcs_command=("definitely-not-a-vcs-binary", "root")
    )
    write(tmp_path / "package.json")
    source = write(tmp_path / "web" / "index.js")

    assert resolver.resolve(source) == str(tmp_path)


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
def test_real_git_toplevel(tmp_path) -> None:
    repo = tmp_path / "checkout"
    repo.mkdir()
    subprocess.run(["git", "init", "-q", str(repo)], check=True)
    source = write(repo / "one" / "two" / "three" / "main.py")

    root = RootResolver(LocalSystem()).resolve(source)

    assert os.path.realpath(root) == os.path.realpath(repo)


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
def test_missing_file_directory_ignores_repo_at_cwd(tmp_path, monkeypatch) -> None:
    unrelated = tmp_path / "unrelated_repo"
    unrelated.mkdir()
    subprocess.run(["git", "init", "-q", str(unrelated)], check=True)
    write(unrelated / "Makefile", "run:\n\ttrue\n")
    monkeypatch.chdir(unrelated)
    source = str(tmp_path / "scratch" / "hello.py")

    root = RootResolver(LocalSystem(), markers=("no-such-marker-file",)).resolve(source)

    assert root == str(tmp_path / "scratch")


def test_local_system_refuses_missing_working_directory(tmp_path) -> None:
    result = LocalSystem().probe(["true"], cwd=str(tmp_path / "not-created"))

    assert result.returncode == -1
    assert result.first_line == ""


def test_vcs_query_is_skipped_for_missing_directory(tmp_path) -> None:
    host = FakeHost(vcs_root=str(tmp_path))

    assert make_resolver(host).vcs_root(str(tmp_path / "not-created")) is None
    assert host.probes == []
