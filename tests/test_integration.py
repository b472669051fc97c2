"""
Integration tests — Look against a real Subversion repository

These tests create a throwaway repository with svnadmin, commit through
a file:// working copy, and read the revisions back with svnlook.

SKIP CONDITIONS:
- Skipped unless svnadmin, svn and svnlook are all installed
"""

import shutil
import subprocess

import pytest

from svnlook import Look, LookConfig, CommandFailed, check_version


def svn_is_available() -> bool:
    """Check if the Subversion command line tools are installed."""
    for tool in ("svnadmin", "svn", "svnlook"):
        if shutil.which(tool) is None:
            return False
    try:
        result = subprocess.run(["svnlook", "--version"], capture_output=True, timeout=5)
        return result.returncode == 0
    except (subprocess.SubprocessError, OSError):
        return False


requires_svn = pytest.mark.skipif(
    not svn_is_available(),
    reason="Subversion is not installed or not available"
)

pytestmark = [requires_svn, pytest.mark.requires_svn]


# ============================================================================
# FIXTURES
# ============================================================================

def run(*args, cwd=None):
    subprocess.run(list(args), cwd=cwd, capture_output=True, check=True)


@pytest.fixture
def svn_repo(tmp_path):
    """
    Repository with two revisions:
      r1: add 'file' (log "log\\n", author "tester")
      r2: copy 'file' to 'copy', modify 'file', set a property on 'file'
    """
    repo = tmp_path / "repo"
    wc = tmp_path / "wc"
    run("svnadmin", "create", str(repo))
    run("svn", "checkout", "-q", repo.as_uri(), str(wc))

    (wc / "file").write_text("first line\n")
    run("svn", "add", "-q", "file", cwd=wc)
    msg = tmp_path / "msg1"
    msg.write_text("log\n")
    run("svn", "commit", "-q", "--username", "tester", "-F", str(msg), cwd=wc)

    run("svn", "copy", "-q", "file", "copy", cwd=wc)
    (wc / "file").write_text("first line\nsecond line\n")
    run("svn", "propset", "-q", "svn:mime-type", "text/plain", "file", cwd=wc)
    run("svn", "commit", "-q", "--username", "tester", "-m", "second", cwd=wc)

    return repo


# ============================================================================
# TESTS
# ============================================================================

class TestRevisionOne:
    """A revision adding one file."""

    def test_author_log_added(self, svn_repo):
        look = Look(str(svn_repo), revision=1)
        assert look.author() == "tester"
        assert look.log_msg() == "log\n"
        assert look.added() == ["file"]

    def test_nothing_else_changed(self, svn_repo):
        look = Look(str(svn_repo), revision=1)
        assert look.updated() == []
        assert look.deleted() == []
        assert look.copied_to() == []

    def test_cat(self, svn_repo):
        look = Look(str(svn_repo), revision=1)
        assert look.cat("file") == "first line"
        assert look.cat("file", lines=True) == ["first line"]

    def test_filesize(self, svn_repo):
        assert Look(str(svn_repo), revision=1).filesize("file") == "11"

    def test_no_lock(self, svn_repo):
        assert Look(str(svn_repo), revision=1).lock("file") is None


class TestRevisionTwo:
    """A revision with a copy, a content change and a property change."""

    def test_changes(self, svn_repo):
        look = Look(str(svn_repo), revision=2)
        assert look.added() == ["copy"]
        assert look.updated() == ["file"]
        assert look.prop_modified() == ["file"]
        assert look.copied_to() == ["copy"]
        assert look.copied_from() == ["file"]
        assert look.changed_hash().copied["copy"].revision == 1

    def test_properties(self, svn_repo):
        look = Look(str(svn_repo), revision=2)
        assert look.proplist("file") == {"svn:mime-type": "text/plain"}
        assert look.propget("svn:mime-type", "file") == "text/plain"

    def test_dirs_changed(self, svn_repo):
        assert Look(str(svn_repo), revision=2).dirs_changed() == ["/"]

    def test_diff_mentions_file(self, svn_repo):
        diff = Look(str(svn_repo), revision=2).diff()
        assert "+second line" in diff


class TestRepository:
    """Repository-global queries and failures."""

    def test_youngest_ignores_selector(self, svn_repo):
        assert Look(str(svn_repo), revision=1).youngest() == "2"

    def test_uuid(self, svn_repo):
        assert len(Look(str(svn_repo), revision=1).uuid()) == 36

    def test_head(self, svn_repo):
        assert Look(str(svn_repo)).log_msg() == "second"

    def test_bad_revision(self, svn_repo):
        with pytest.raises(CommandFailed):
            Look(str(svn_repo), revision=99).author()

    def test_version(self):
        assert check_version(LookConfig()) >= (1, 4, 0)
