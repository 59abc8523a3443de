"""Pytest configuration and shared fixtures."""

import os
import stat
import sys
from concurrent.futures import Future
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from fantomas_client.domain.tooling import GlobalTool, StartMethod

FIXTURES_DIR = Path(__file__).parent / "fixtures"
FAKE_FANTOMAS = FIXTURES_DIR / "fake_fantomas.py"
FAKE_DOTNET = FIXTURES_DIR / "fake_dotnet.py"

posix_only = pytest.mark.skipif(
    sys.platform == "win32", reason="uses shell wrapper scripts"
)


# ============================================================================
# Config isolation
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_global_config(tmp_path: Path):
    """Point the global config at an empty location for every test.

    Without this, a developer's own ~/.config/fantomas-client/config.toml
    could change defaults seen by the tests.
    """
    with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path / "xdg")}):
        yield tmp_path / "xdg" / "fantomas-client" / "config.toml"


# ============================================================================
# Fake executables
# ============================================================================


def write_wrapper(path: Path, script: Path, env: dict[str, str] | None = None) -> Path:
    """Create an executable shell script that runs a Python script.

    Args:
        path: Where to write the wrapper.
        script: Python script the wrapper execs with the current interpreter.
        env: Extra environment variables exported before exec.

    Returns:
        Path to the executable wrapper.
    """
    exports = "".join(f"export {k}='{v}'\n" for k, v in (env or {}).items())
    path.write_text(f'#!/bin/sh\n{exports}exec "{sys.executable}" "{script}" "$@"\n')
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def spawn_log(tmp_path: Path) -> Path:
    """File the fake daemon appends one line to per start."""
    return tmp_path / "spawns.log"


@pytest.fixture
def fake_fantomas(tmp_path: Path, spawn_log: Path) -> Path:
    """Executable fake `fantomas` that speaks the daemon protocol."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir(exist_ok=True)
    return write_wrapper(
        bin_dir / "fantomas",
        FAKE_FANTOMAS,
        env={"FAKE_FANTOMAS_SPAWN_LOG": str(spawn_log)},
    )


@pytest.fixture
def fake_dotnet(tmp_path: Path, spawn_log: Path) -> Path:
    """Executable fake `dotnet` with a local fantomas tool installed."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir(exist_ok=True)
    return write_wrapper(
        bin_dir / "dotnet",
        FAKE_DOTNET,
        env={
            "FAKE_FANTOMAS_SPAWN_LOG": str(spawn_log),
            "FAKE_FANTOMAS_SCRIPT": str(FAKE_FANTOMAS),
            "FAKE_PYTHON": sys.executable,
        },
    )


def count_spawns(spawn_log: Path) -> int:
    """Number of fake daemons started so far."""
    if not spawn_log.exists():
        return 0
    return len(spawn_log.read_text().splitlines())


# ============================================================================
# In-memory daemon double
# ============================================================================


def completed(result: Any = None, error: BaseException | None = None) -> Future:
    """Create an already resolved future."""
    future: Future = Future()
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(result)
    return future


class FakeDaemon:
    """FormattingDaemon double with scripted results."""

    def __init__(
        self,
        start_method: StartMethod | None = None,
        version: str = "5.2.0",
        document_result: Any = None,
        selection_result: Any = None,
        configuration: str = "indent_size=4",
    ) -> None:
        self._start_method = start_method or GlobalTool()
        self.version_result: Future | None = None
        self._version = version
        self.document_result = document_result
        self.selection_result = selection_result
        self._configuration = configuration
        self.alive = True
        self.close_calls = 0
        self.document_requests: list = []
        self.selection_requests: list = []

    @property
    def start_method(self) -> StartMethod:
        return self._start_method

    @property
    def is_alive(self) -> bool:
        return self.alive

    def version(self) -> Future:
        return self.version_result or completed(self._version)

    def format_document(self, request) -> Future:
        self.document_requests.append(request)
        if isinstance(self.document_result, Future):
            return self.document_result
        return completed(self.document_result)

    def format_selection(self, request) -> Future:
        self.selection_requests.append(request)
        if isinstance(self.selection_result, Future):
            return self.selection_result
        return completed(self.selection_result)

    def configuration(self) -> Future:
        return completed(self._configuration)

    def close(self) -> None:
        self.close_calls += 1
        self.alive = False
