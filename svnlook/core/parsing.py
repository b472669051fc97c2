"""
Parsing — svnlook output to typed values

Pure functions over captured output. Nothing here spawns a process, so
each parser can be exercised with sample text.

Formats handled:
- changed --copy-info: 4-column status prefix + path, with copy sources
  reported on a following "(from PATH:rN)" record
- proplist --verbose: "  name : value" blocks (and the newer layout of
  indented name lines followed by further-indented value lines)
- lock: "Key: value" header lines ending in a multi-line Comment block
- --version: "svnlook, version X.Y.Z ..."
"""

import logging
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, NamedTuple, Optional, Tuple

logger = logging.getLogger(__name__)


# Width of the status prefix in "changed" records
STATUS_WIDTH = 4

# Copy source annotation, e.g. "(from trunk/old.txt:r5)"
COPY_SOURCE_RE = re.compile(r"^\(from (.*?):r(\d+)\)$")

# Legacy proplist --verbose entry start: two spaces, name, " : "
PROPERTY_RE = re.compile(r"^  (\S+) : ", re.MULTILINE)

VERSION_RE = re.compile(r"(\d+)\.(\d+)\.(\d+)")

# svnlook lock header keys -> LockInfo fields
LOCK_FIELDS = {
    "UUID Token": "token",
    "Owner": "owner",
    "Created": "created",
    "Expires": "expires",
}


class CopySource(NamedTuple):
    """Where a copied path came from."""
    path: str
    revision: int


@dataclass(frozen=True)
class ChangeSet:
    """
    Paths touched by one revision or transaction.

    Lists keep svnlook's output order. A path may appear in more than
    one list (e.g. both added and prop_modified). Every key of copied is
    also in added. copied is a read-only mapping.
    """
    added: Tuple[str, ...] = ()
    deleted: Tuple[str, ...] = ()
    updated: Tuple[str, ...] = ()
    prop_modified: Tuple[str, ...] = ()
    copied: Mapping[str, CopySource] = field(default_factory=dict)

    def __post_init__(self):
        # read-only view so a cached ChangeSet cannot be altered
        object.__setattr__(self, "copied", MappingProxyType(dict(self.copied)))

    def changed_paths(self) -> List[str]:
        """added ++ updated ++ deleted ++ prop_modified."""
        return [*self.added, *self.updated, *self.deleted, *self.prop_modified]

    def copied_to(self) -> List[str]:
        return list(self.copied)

    def copied_from(self) -> List[str]:
        """Source paths, in the same order as copied_to()."""
        return [source.path for source in self.copied.values()]

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.deleted or self.updated or self.prop_modified)

    @property
    def summary(self) -> str:
        """Human-readable summary."""
        parts = []
        if self.added:
            parts.append(f"+{len(self.added)} added")
        if self.updated:
            parts.append(f"~{len(self.updated)} updated")
        if self.deleted:
            parts.append(f"-{len(self.deleted)} deleted")
        if self.prop_modified:
            parts.append(f"*{len(self.prop_modified)} prop-modified")
        if self.copied:
            parts.append(f">{len(self.copied)} copied")
        return ", ".join(parts) if parts else "no changes"

    def to_dict(self) -> Dict:
        return {
            'added': list(self.added),
            'deleted': list(self.deleted),
            'updated': list(self.updated),
            'prop_modified': list(self.prop_modified),
            'copied': {
                dest: {'path': source.path, 'revision': source.revision}
                for dest, source in self.copied.items()
            },
        }


@dataclass(frozen=True)
class LockInfo:
    """A lock held on a repository path."""
    token: Optional[str] = None
    owner: Optional[str] = None
    created: Optional[str] = None
    expires: Optional[str] = None
    comment: Optional[str] = None
    fields: Dict[str, str] = field(default_factory=dict)  # raw header, as printed


def parse_changed(lines: Iterable[str]) -> ChangeSet:
    """
    Parse `svnlook changed --copy-info` records into a ChangeSet.

    Each record is a 4-column status prefix followed by the path:
    column 0 is the content action (A, D, U; anything else means the
    content is untouched), column 1 is "U" when properties changed,
    columns 2-3 are ignored.

    A copy source is reported on its own record right after the "A"
    record it belongs to, so it is attached to the last added path.
    That adjacency is assumed, not checked.
    """
    added: List[str] = []
    deleted: List[str] = []
    updated: List[str] = []
    prop_modified: List[str] = []
    copied: Dict[str, CopySource] = {}

    for line in lines:
        line = line.rstrip("\n")
        if len(line) <= STATUS_WIDTH:
            continue

        action, prop = line[0], line[1]
        path = line[STATUS_WIDTH:]

        if action == "A":
            added.append(path)
        elif action == "D":
            deleted.append(path)
        elif action == "U":
            updated.append(path)
        else:
            match = COPY_SOURCE_RE.match(line[1:].lstrip())
            if match:
                if added:
                    copied[added[-1]] = CopySource(match.group(1), int(match.group(2)))
                else:
                    logger.warning("Ignoring copy source with no added path: %s", line)
                continue

        if prop == "U":
            prop_modified.append(path)

    return ChangeSet(
        added=tuple(added),
        deleted=tuple(deleted),
        updated=tuple(updated),
        prop_modified=tuple(prop_modified),
        copied=copied,
    )


def _chomp(text: str) -> str:
    return text[:-1] if text.endswith("\n") else text


def parse_proplist(text: str) -> Dict[str, str]:
    """
    Parse `svnlook proplist --verbose` output into {name: value}.

    Values keep embedded newlines; only the newline separating a value
    from the next entry is removed.
    """
    fragments = PROPERTY_RE.split(text)
    if len(fragments) == 1:
        return _parse_indented_proplist(text)

    # fragments[0] precedes the first property
    names = fragments[1::2]
    values = fragments[2::2]
    return {name: _chomp(value) for name, value in zip(names, values)}


def _parse_indented_proplist(text: str) -> Dict[str, str]:
    """Newer layout: "  name" lines, each followed by "    value" lines."""
    props: Dict[str, List[str]] = {}
    current: Optional[str] = None

    for line in text.split("\n"):
        if line.startswith("    ") and current is not None:
            props[current].append(line[4:])
        elif line.startswith("  ") and line.strip():
            current = line[2:]
            props[current] = []

    return {name: "\n".join(value_lines) for name, value_lines in props.items()}


def parse_lock(lines: Iterable[str]) -> Optional[LockInfo]:
    """
    Parse `svnlook lock` output.

    Returns None when the path holds no lock (svnlook prints nothing).
    The comment is everything after the "Comment (N lines):" header, so
    it may contain colons and newlines.
    """
    raw: Dict[str, str] = {}
    comment: Optional[str] = None

    remaining = [line.rstrip("\n") for line in lines]
    for index, line in enumerate(remaining):
        if not line:
            continue
        key, _, value = line.partition(":")
        if key.startswith("Comment"):
            comment = "\n".join(remaining[index + 1:])
            break
        raw[key] = value.lstrip()

    if not raw and comment is None:
        return None

    known = {attr: raw.get(key) or None for key, attr in LOCK_FIELDS.items()}
    return LockInfo(comment=comment, fields=raw, **known)


def parse_version(text: str) -> Optional[Tuple[int, int, int]]:
    """Extract (major, minor, patch) from `svnlook --version` output."""
    first_line = text.split("\n", 1)[0]
    match = VERSION_RE.search(first_line)
    if not match:
        return None
    major, minor, patch = (int(part) for part in match.groups())
    return major, minor, patch
