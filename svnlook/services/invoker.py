"""
Invoker — The subprocess boundary around svnlook

Runs `svnlook SUBCOMMAND REPO [-r REV | -t TXN] [ARGS...]` synchronously
and returns its standard output. Standard error is not captured: svnlook
diagnostics reach the operator's terminal unparsed.

Invocation settings (binary, PATH, locale, encoding) come from an
explicit LookConfig. The current process environment is never mutated.
"""

import logging
import subprocess
import threading
from typing import Dict, List, Optional, Sequence, Tuple, Union

from ..config import LookConfig
from ..core.parsing import parse_version
from ..core.selector import Head, Selector
from ..errors import CommandFailed, SpawnFailed, UnsupportedVersion

logger = logging.getLogger(__name__)


# Repository-global subcommands: never given -r/-t
SELECTORLESS_SUBCOMMANDS = frozenset({"youngest", "uuid", "lock"})


def split_output(text: str, lines: bool) -> Union[str, List[str]]:
    """
    Shape captured stdout.

    lines=True: one entry per line, line terminators removed.
    lines=False: the whole text minus exactly one trailing newline.
    """
    if lines:
        if not text:
            return []
        result = text.split("\n")
        if text.endswith("\n"):
            result.pop()
        return result

    return text[:-1] if text.endswith("\n") else text


class Invoker:
    """Runs svnlook against one repository and selector."""

    def __init__(
        self,
        repo: str,
        selector: Optional[Selector] = None,
        config: Optional[LookConfig] = None,
    ):
        """
        Args:
            repo: Path to the repository
            selector: Revision/transaction to scope queries. Defaults to Head.
            config: Invocation settings. Defaults to LookConfig().
        """
        self.repo = str(repo)
        self.selector = selector if selector is not None else Head()
        self.config = config or LookConfig()

        error = self.config.validate()
        if error:
            raise ValueError(error)

    def command(self, subcommand: str, args: Sequence[str] = ()) -> List[str]:
        """Build the argument vector for a query."""
        cmd = [self.config.binary, subcommand, self.repo]
        if subcommand not in SELECTORLESS_SUBCOMMANDS:
            cmd.extend(self.selector.to_args())
        cmd.extend(str(arg) for arg in args)
        return cmd

    def invoke(
        self,
        subcommand: str,
        args: Sequence[str] = (),
        lines: bool = False,
    ) -> Union[str, List[str]]:
        """
        Run a query and return its output.

        Args:
            subcommand: svnlook subcommand (e.g. "author", "changed")
            args: Extra arguments appended after the selector
            lines: Return a list of lines instead of one string

        Raises:
            SpawnFailed: svnlook could not be executed
            CommandFailed: svnlook exited with a non-zero status
        """
        cmd = self.command(subcommand, args)
        return split_output(self._run(cmd), lines)

    def _run(self, cmd: List[str]) -> str:
        logger.debug("Running: %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                env=self.config.environment(),
                check=False,
            )
        except OSError as e:
            raise SpawnFailed(cmd, e) from e

        if result.returncode != 0:
            raise CommandFailed(cmd, result.returncode)

        return result.stdout.decode(self.config.encoding, errors="surrogateescape")


_version_cache: Dict[Tuple[str, Optional[str]], Tuple[int, int, int]] = {}
_version_lock = threading.Lock()


def check_version(config: Optional[LookConfig] = None) -> Tuple[int, int, int]:
    """
    Verify that svnlook is installed and recent enough.

    Probes `svnlook --version` once per (binary, PATH) for the life of
    the process.

    Returns:
        The installed (major, minor, patch)

    Raises:
        SpawnFailed: svnlook not found in PATH
        CommandFailed: svnlook --version failed
        UnsupportedVersion: version unparseable or below config.min_version
    """
    config = config or LookConfig()
    key = (config.binary, config.search_path)

    with _version_lock:
        version = _version_cache.get(key)
        if version is None:
            cmd = [config.binary, "--version"]
            logger.debug("Running: %s", " ".join(cmd))
            try:
                result = subprocess.run(
                    cmd,
                    stdout=subprocess.PIPE,
                    env=config.environment(),
                    check=False,
                )
            except OSError as e:
                raise SpawnFailed(cmd, e) from e
            if result.returncode != 0:
                raise CommandFailed(cmd, result.returncode)

            text = result.stdout.decode(config.encoding, errors="replace")
            version = parse_version(text)
            if version is None:
                raise UnsupportedVersion(None, config.min_version)
            _version_cache[key] = version

    if version < tuple(config.min_version):
        raise UnsupportedVersion(version, config.min_version)
    return version


def reset_version_cache() -> None:
    """Forget probed versions (for tests)."""
    with _version_lock:
        _version_cache.clear()
