"""
Services — External integration layer

- Invoker: runs svnlook subcommands and shapes their output
- check_version: one-time svnlook version probe
"""

from .invoker import Invoker, check_version, split_output, SELECTORLESS_SUBCOMMANDS

__all__ = [
    "Invoker", "check_version", "split_output", "SELECTORLESS_SUBCOMMANDS",
]
