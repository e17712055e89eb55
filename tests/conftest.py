# tests/conftest.py - Pytest configuration
"""
Pytest configuration and shared fixtures.
"""
import pytest
import structlog

from pcomp.engine import Completer, CompletionSession
from pcomp.runtime import CommandRegistry, CompletionConfig, FileSystem, RuleTable


def make_executable(path):
    """Create an executable script at path."""
    path.write_text("#!/bin/sh\n")
    path.chmod(0o755)
    return path


def make_file(path):
    """Create a plain, non-executable file at path."""
    path.write_text("data\n")
    path.chmod(0o644)
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep user environment overrides out of configuration tests."""
    for name in ("PCOMP_IGNORE_CASE", "PCOMP_CYCLE_CUTOFF", "PCOMP_VERBOSE"):
        monkeypatch.delenv(name, raising=False)
    yield
    structlog.reset_defaults()


@pytest.fixture
def work_dir(tmp_path):
    """Working directory for file candidates."""
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def bin_dir(tmp_path):
    """The only directory on the search path."""
    path = tmp_path / "bin"
    path.mkdir()
    return path


@pytest.fixture
def config(bin_dir):
    return CompletionConfig(search_path=[str(bin_dir)])


@pytest.fixture
def registry():
    return CommandRegistry()


@pytest.fixture
def fs(work_dir):
    return FileSystem(cwd=str(work_dir))


@pytest.fixture
def make_completer(config, registry, fs):
    """Build a Completer over the temporary directories, with config overrides."""

    def factory(rules=None, **overrides):
        settings = config.model_copy(update=overrides)
        return Completer(
            config=settings,
            registry=registry,
            rules=rules if rules is not None else RuleTable(),
            fs=fs,
        )

    return factory


@pytest.fixture
def make_session(make_completer):
    """Build a CompletionSession, with config overrides."""

    def factory(rules=None, **overrides):
        return CompletionSession(make_completer(rules=rules, **overrides))

    return factory
