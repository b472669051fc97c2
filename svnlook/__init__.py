"""
svnlook — A caching wrapper around the svnlook command

Gives Subversion hook scripts an object per revision/transaction that
answers svnlook queries, running each cacheable query only once.

Usage:
    from svnlook import Look

    look = Look("/repo/path", revision=123)
    look.author()
    look.log_msg()
    look.added()
    look.updated()
    look.deleted()
    look.changed()
    look.cat("/path/to/file/in/repository")

    txn_look = Look("/repo/path", transaction="123-1")
"""

__version__ = "0.1.0"

# Core layer
from .core.selector import Selector, Revision, Transaction, Head, make_selector
from .core.parsing import ChangeSet, CopySource, LockInfo

# Services layer
from .services.invoker import Invoker, check_version

# Session
from .look import Look

# Config and errors (stay at root)
from .config import LookConfig, ConfigManager, get_config
from .errors import LookError, SpawnFailed, CommandFailed, UnsupportedVersion

__all__ = [
    # Core
    'Selector', 'Revision', 'Transaction', 'Head', 'make_selector',
    'ChangeSet', 'CopySource', 'LockInfo',
    # Services
    'Invoker', 'check_version',
    # Session
    'Look',
    # Config
    'LookConfig', 'ConfigManager', 'get_config',
    # Errors
    'LookError', 'SpawnFailed', 'CommandFailed', 'UnsupportedVersion',
]
