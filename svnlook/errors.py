"""
Errors — Failure kinds surfaced by svnlook queries

All errors propagate synchronously to the caller of the accessor that
triggered them. Nothing is retried: every query is read-only and
idempotent, so retry policy belongs to the caller.
"""

from typing import List, Optional, Sequence, Tuple


class LookError(Exception):
    """Base class for all svnlook failures."""


class SpawnFailed(LookError):
    """The svnlook executable could not be started."""

    def __init__(self, command: Sequence[str], cause: Optional[BaseException] = None):
        self.command: List[str] = list(command)
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Can't exec {' '.join(self.command[:2])}{detail}")


class CommandFailed(LookError):
    """svnlook ran but exited with a non-zero status."""

    def __init__(self, command: Sequence[str], exit_code: int):
        self.command: List[str] = list(command)
        self.exit_code = exit_code
        super().__init__(
            f"{' '.join(self.command[:2])} failed with exit code {exit_code}"
        )


class UnsupportedVersion(LookError):
    """The installed svnlook is missing or older than required."""

    def __init__(self, found: Optional[Tuple[int, int, int]], required: Tuple[int, int, int]):
        self.found = found
        self.required = required
        wanted = ".".join(str(part) for part in required)
        if found is None:
            message = "Can't grok Subversion version from svnlook --version"
        else:
            have = ".".join(str(part) for part in found)
            message = f"svnlook {wanted} or newer is required, found {have}"
        super().__init__(message)
