"""
Look — A caching handle on one revision or transaction

svnlook is the workhorse of Subversion hook scripts. A Look binds one
repository to one revision (or transaction) and exposes a method per
svnlook query. Results that cannot change for the life of the handle
are fetched once and cached; everything derived from `svnlook changed`
is computed from a single invocation.

Usage:
    from svnlook import Look

    look = Look("/var/svn/repo", revision=123)
    look.author()
    look.log_msg()
    look.added()
    look.copied_to()

    # In a pre-commit hook
    look = Look(repos, transaction=txn)
    for path in look.changed():
        ...

Caching:
- author, log_msg, date, info, dirs_changed, changed_hash: once per Look
- proplist: once per path
- propget, lock, cat, diff, tree, filesize, uuid, youngest: every call
"""

import logging
from typing import Dict, List, Optional, Union

from .config import LookConfig, get_config
from .core.cache import KeyedSlots, LazySlot
from .core.parsing import ChangeSet, LockInfo, parse_changed, parse_lock, parse_proplist
from .core.selector import Revision, Selector, Transaction, make_selector
from .services.invoker import Invoker, check_version

logger = logging.getLogger(__name__)


# diff options
NO_DIFF_DELETED = "--no-diff-deleted"
NO_DIFF_ADDED = "--no-diff-added"
DIFF_COPY_FROM = "--diff-copy-from"

# tree options
FULL_PATHS = "--full-paths"
SHOW_IDS = "--show-ids"
NON_RECURSIVE = "--non-recursive"


class Look:
    """Cached svnlook queries for one repository + revision/transaction."""

    def __init__(
        self,
        repo: str,
        revision: Optional[Union[int, str]] = None,
        transaction: Optional[str] = None,
        config: Optional[LookConfig] = None,
        invoker: Optional[Invoker] = None,
    ):
        """
        Args:
            repo: Path to the repository
            revision: Revision number. Mutually exclusive with transaction.
            transaction: Transaction id. Mutually exclusive with revision.
                With neither, queries see the youngest revision.
            config: Invocation settings for the default Invoker. Defaults to
                get_config() (YAML files and SVNLOOK_* variables).
            invoker: Pre-built invoker (must be bound to the same repo).
                Mutually exclusive with config.

        Raises:
            ValueError: both revision and transaction, or both config and
                invoker, were given
        """
        if invoker is not None and config is not None:
            raise ValueError("Pass either config or invoker, not both")

        self._repo = str(repo)
        self._selector: Selector = make_selector(revision, transaction)
        if invoker is None:
            invoker = Invoker(self._repo, self._selector, config if config is not None else get_config())
        self._invoker = invoker

        self._author = LazySlot()
        self._log = LazySlot()
        self._date = LazySlot()
        self._info = LazySlot()
        self._dirs_changed = LazySlot()
        self._changed_hash = LazySlot()
        self._changed = LazySlot()
        self._proplists = KeyedSlots()

    @classmethod
    def open(
        cls,
        repo: str,
        revision: Optional[Union[int, str]] = None,
        transaction: Optional[str] = None,
        config: Optional[LookConfig] = None,
    ) -> 'Look':
        """Like Look(...), but first verify the installed svnlook version."""
        if config is None:
            config = get_config()
        check_version(config)
        return cls(repo, revision=revision, transaction=transaction, config=config)

    def __repr__(self) -> str:
        return f"Look({self._repo!r}, {self._selector!r})"

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    @property
    def repo(self) -> str:
        """Repository path passed to the constructor."""
        return self._repo

    @property
    def selector(self) -> Selector:
        return self._selector

    @property
    def rev(self) -> Optional[int]:
        """Revision number, or None for a transaction/HEAD look."""
        if isinstance(self._selector, Revision):
            return self._selector.number
        return None

    @property
    def txn(self) -> Optional[str]:
        """Transaction id, or None for a revision look."""
        if isinstance(self._selector, Transaction):
            return self._selector.id
        return None

    # ------------------------------------------------------------------
    # Cached scalars
    # ------------------------------------------------------------------

    def _cached(self, slot: LazySlot, subcommand: str, lines: bool = False):
        def compute():
            logger.debug("Populating %s cache for %r", subcommand, self)
            return self._invoker.invoke(subcommand, lines=lines)
        return slot.get(compute)

    def author(self) -> str:
        return self._cached(self._author, "author")

    def log_msg(self) -> str:
        """Log message, with the trailing newline svnlook adds removed."""
        return self._cached(self._log, "log")

    def date(self) -> str:
        return self._cached(self._date, "date")

    def info(self) -> str:
        """Author, datestamp, log message size and log message."""
        return self._cached(self._info, "info")

    def dirs_changed(self) -> List[str]:
        return list(self._cached(self._dirs_changed, "dirs-changed", lines=True))

    # ------------------------------------------------------------------
    # Change set and its projections
    # ------------------------------------------------------------------

    def changed_hash(self) -> ChangeSet:
        """
        Parse `svnlook changed --copy-info` once and cache the result.

        All of added/updated/deleted/prop_modified/changed/copied_* are
        views over this value.
        """
        def compute():
            records = self._invoker.invoke("changed", ["--copy-info"], lines=True)
            changes = parse_changed(records)
            logger.debug("Change set for %r: %s", self, changes.summary)
            return changes
        return self._changed_hash.get(compute)

    def added(self) -> List[str]:
        return list(self.changed_hash().added)

    def updated(self) -> List[str]:
        return list(self.changed_hash().updated)

    def deleted(self) -> List[str]:
        return list(self.changed_hash().deleted)

    def prop_modified(self) -> List[str]:
        return list(self.changed_hash().prop_modified)

    def changed(self) -> List[str]:
        """Added, updated, deleted and prop-modified paths, in that order."""
        paths = self._changed.get(lambda: tuple(self.changed_hash().changed_paths()))
        return list(paths)

    def copied_to(self) -> List[str]:
        """New names of copied paths."""
        return self.changed_hash().copied_to()

    def copied_from(self) -> List[str]:
        """Original names of copied paths, in copied_to() order."""
        return self.changed_hash().copied_from()

    # ------------------------------------------------------------------
    # Properties and locks
    # ------------------------------------------------------------------

    def proplist(self, path: str) -> Dict[str, str]:
        """Properties of path. Cached per path."""
        def compute():
            text = self._invoker.invoke("proplist", ["--verbose", path])
            return parse_proplist(text)
        return dict(self._proplists.get(path, compute))

    def propget(self, name: str, path: str) -> str:
        return self._invoker.invoke("propget", [name, path])

    def lock(self, path: str) -> Optional[LockInfo]:
        """
        Lock held on path, or None.

        Not cached: locks can be taken or released while the Look lives.
        """
        return parse_lock(self._invoker.invoke("lock", [path], lines=True))

    # ------------------------------------------------------------------
    # Pass-throughs
    # ------------------------------------------------------------------

    def cat(self, path: str, lines: bool = False) -> Union[str, List[str]]:
        """Contents of the file at path, whole or as a list of lines."""
        return self._invoker.invoke("cat", [path], lines=lines)

    def diff(self, *opts: str, lines: bool = False) -> Union[str, List[str]]:
        """
        GNU-style diffs of changed files and properties.

        Options: NO_DIFF_DELETED, NO_DIFF_ADDED, DIFF_COPY_FROM.
        """
        return self._invoker.invoke("diff", opts, lines=lines)

    def tree(self, path: Optional[str] = None, *opts: str, lines: bool = True) -> Union[str, List[str]]:
        """
        Repository tree starting at path (the root if omitted).

        Options: FULL_PATHS, SHOW_IDS, NON_RECURSIVE.
        """
        args = ([path] if path else []) + list(opts)
        return self._invoker.invoke("tree", args, lines=lines)

    def filesize(self, path: str) -> str:
        """Size in bytes of the file at path, as svnlook prints it."""
        return self._invoker.invoke("filesize", [path])

    def uuid(self) -> str:
        return self._invoker.invoke("uuid")

    def youngest(self) -> str:
        return self._invoker.invoke("youngest")
