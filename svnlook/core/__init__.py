"""
Core — Pure building blocks for svnlook sessions

- Selector: revision / transaction / HEAD scoping
- LazySlot, KeyedSlots: at-most-once memoization
- Parsers: svnlook output to typed values
"""

from .selector import Selector, Revision, Transaction, Head, make_selector
from .cache import LazySlot, KeyedSlots
from .parsing import (
    ChangeSet, CopySource, LockInfo,
    parse_changed, parse_proplist, parse_lock, parse_version,
)

__all__ = [
    # Selector
    "Selector", "Revision", "Transaction", "Head", "make_selector",
    # Cache
    "LazySlot", "KeyedSlots",
    # Parsing
    "ChangeSet", "CopySource", "LockInfo",
    "parse_changed", "parse_proplist", "parse_lock", "parse_version",
]
