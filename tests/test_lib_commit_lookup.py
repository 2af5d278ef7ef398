"""Tests for commit enrichment through the gh CLI."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import pytest

import lbstatus.lib.commit_lookup as commit_lookup_module
from lbstatus.lib.commit_lookup import CommitInfo, CommitLookup
from lbstatus.lib.errors import CommitLookupError

GH_OUTPUT = json.dumps(
    {"sha": "abc123ef", "commit": {"message": "Fix player\n\nLonger body", "author": {"name": "Ada Lovelace"}}}
).encode("utf-8")


class _FakeProcess:
    def __init__(self, returncode: int = 0, stdout: bytes = b"", stderr: bytes = b"", delay: float = 0.0):
        self.returncode: int | None = None
        self._exit_code = returncode
        self._stdout = stdout
        self._stderr = stderr
        self._delay = delay
        self.killed = False

    async def communicate(self) -> tuple[bytes, bytes]:
        await asyncio.sleep(self._delay)
        self.returncode = self._exit_code
        return self._stdout, self._stderr

    def kill(self) -> None:
        self.killed = True
        self.returncode = -9

    async def wait(self) -> int:
        return self.returncode


def _patch_subprocess(monkeypatch: pytest.MonkeyPatch, result: Any, calls: list | None = None) -> None:
    async def _fake_exec(*cmd: str, **kwargs: Any) -> _FakeProcess:
        if calls is not None:
            calls.append(cmd)
        if isinstance(result, BaseException):
            raise result
        return result

    monkeypatch.setattr(commit_lookup_module.asyncio, "create_subprocess_exec", _fake_exec)


def test_commit_lookup_parses_gh_output(monkeypatch: pytest.MonkeyPatch) -> None:
    """A successful gh call yields the commit message and author name.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        None: Assertions validate the parsed commit and the gh invocation.
    """

    calls: list = []
    _patch_subprocess(monkeypatch, _FakeProcess(stdout=GH_OUTPUT), calls)

    commit = asyncio.run(CommitLookup(owner="lookback").lookup("player", "abc123ef"))

    assert commit == CommitInfo(message="Fix player\n\nLonger body", author_name="Ada Lovelace")
    assert calls[0][:2] == ("gh", "api")
    assert calls[0][-1] == "/repos/lookback/player/commits/abc123ef"


def test_commit_lookup_missing_gh_is_not_an_error(monkeypatch: pytest.MonkeyPatch) -> None:
    """gh not being installed just means no enrichment."""

    _patch_subprocess(monkeypatch, FileNotFoundError("No such file or directory: 'gh'"))

    assert asyncio.run(CommitLookup().lookup("player", "abc123ef")) is None


def test_commit_lookup_failing_gh_is_fatal(monkeypatch: pytest.MonkeyPatch) -> None:
    """An installed gh that exits non-zero raises with its stderr attached."""

    _patch_subprocess(monkeypatch, _FakeProcess(returncode=1, stderr=b"HTTP 404: Not Found"))

    with pytest.raises(CommitLookupError, match="HTTP 404") as excinfo:
        asyncio.run(CommitLookup().lookup("player", "abc123ef"))

    assert excinfo.value.service == "player"


def test_commit_lookup_malformed_output_is_fatal(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_subprocess(monkeypatch, _FakeProcess(stdout=b'{"sha": "abc123ef"}'))

    with pytest.raises(CommitLookupError):
        asyncio.run(CommitLookup().lookup("player", "abc123ef"))


def test_commit_lookup_timeout_kills_gh(monkeypatch: pytest.MonkeyPatch) -> None:
    """A hanging gh is killed and reported instead of stalling the cycle."""

    process = _FakeProcess(stdout=GH_OUTPUT, delay=1.0)
    _patch_subprocess(monkeypatch, process)

    with pytest.raises(CommitLookupError, match="did not answer"):
        asyncio.run(CommitLookup(timeout=0.05).lookup("player", "abc123ef"))

    assert process.killed


def test_commit_lookup_caches_found_commits(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list = []
    _patch_subprocess(monkeypatch, _FakeProcess(stdout=GH_OUTPUT), calls)
    lookup = CommitLookup()

    async def _twice() -> tuple:
        return await lookup.lookup("player", "abc123ef"), await lookup.lookup("player", "abc123ef")

    first, second = asyncio.run(_twice())

    assert first == second
    assert len(calls) == 1


def test_commit_lookup_disabled_never_spawns(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list = []
    _patch_subprocess(monkeypatch, _FakeProcess(stdout=GH_OUTPUT), calls)

    assert asyncio.run(CommitLookup(enabled=False).lookup("player", "abc123ef")) is None
    assert calls == []


def test_commit_lookup_cancellation_kills_gh(monkeypatch: pytest.MonkeyPatch) -> None:
    """Cancelling a lookup (Ctrl+C in watch mode) kills and reaps the gh child.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        None: Assertions validate that the child was killed.
    """

    process = _FakeProcess(stdout=GH_OUTPUT, delay=10.0)
    _patch_subprocess(monkeypatch, process)

    async def _cancel_midway() -> None:
        task = asyncio.ensure_future(CommitLookup(timeout=30).lookup("player", "abc123ef"))
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(_cancel_midway())

    assert process.killed
    assert process.returncode == -9


def test_commit_lookup_finished_gh_is_not_killed(monkeypatch: pytest.MonkeyPatch) -> None:
    process = _FakeProcess(stdout=GH_OUTPUT)
    _patch_subprocess(monkeypatch, process)

    asyncio.run(CommitLookup().lookup("player", "abc123ef"))

    assert not process.killed
