"""
Shared pytest fixtures for the svnlook test suite.

Usage in tests:
    def test_something(fake_invoker):
        fake_invoker.responses["author"] = "alice\\n"
        look = Look("/repo", revision=1, invoker=fake_invoker)

    def test_changes(sample_look):
        # sample_look serves the canned output from tests.factories
        assert "trunk/new.txt" in sample_look.added()
"""

import pytest

from svnlook import Look
from svnlook.config import ConfigManager, ENV_OVERRIDES
from svnlook.services.invoker import reset_version_cache
from tests.factories import FakeInvoker, CHANGED_OUTPUT, PROPLIST_OUTPUT, LOCK_OUTPUT


@pytest.fixture
def fake_invoker():
    """An empty FakeInvoker. Unknown subcommands fail with CommandFailed."""
    return FakeInvoker()


@pytest.fixture
def sample_invoker():
    """FakeInvoker pre-loaded with a typical revision."""
    return FakeInvoker({
        "author": "harry\n",
        "log": "Fix the frobnicator\n\n",
        "date": "2010-02-16 17:23:08 -0200 (Tue, 16 Feb 2010)\n",
        "info": "harry\n2010-02-16 17:23:08 -0200 (Tue, 16 Feb 2010)\n20\nFix the frobnicator\n\n",
        "dirs-changed": "trunk/\ntrunk/docs/\n",
        "changed": CHANGED_OUTPUT,
        "proplist": PROPLIST_OUTPUT,
        "propget": "text/plain\n",
        "lock": LOCK_OUTPUT,
        "cat": "line one\nline two\n",
        "diff": "Modified: trunk/main.c\n===\n",
        "tree": "/\n trunk/\n  main.c\n",
        "filesize": "1234\n",
        "uuid": "d7d6d5c0-0000-4b44-9a8d-9bb3c0f2a1e7\n",
        "youngest": "42\n",
    })


@pytest.fixture
def sample_look(sample_invoker):
    """A revision Look backed by sample_invoker."""
    return Look("/var/svn/repo", revision=42, invoker=sample_invoker)


@pytest.fixture(autouse=True)
def clear_version_cache():
    """Version probes are memoized per process; isolate each test."""
    reset_version_cache()
    yield
    reset_version_cache()


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """Point the user config at a temp dir and clear env overrides."""
    user_dir = tmp_path / "home" / ".svnlook"
    monkeypatch.setattr(ConfigManager, "USER_CONFIG_DIR", user_dir)
    monkeypatch.setattr(ConfigManager, "USER_CONFIG_FILE", user_dir / "config.yaml")
    for key in ENV_OVERRIDES:
        monkeypatch.delenv(key, raising=False)
    return user_dir
