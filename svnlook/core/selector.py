"""
Selector — Which revision or transaction a look is scoped to

A session is bound to exactly one selector, resolved once at
construction. All selector-dependent argument formatting is a pure
function of the variant.
"""

from dataclasses import dataclass
from typing import List, Optional, Union


@dataclass(frozen=True)
class Revision:
    """A committed revision (svnlook -r N)."""
    number: int

    def __post_init__(self):
        if isinstance(self.number, bool) or not isinstance(self.number, int):
            raise TypeError(f"Revision number must be an int, got {self.number!r}")
        if self.number < 0:
            raise ValueError(f"Revision number must be >= 0, got {self.number}")

    def to_args(self) -> List[str]:
        return ["-r", str(self.number)]


@dataclass(frozen=True)
class Transaction:
    """An uncommitted transaction, as seen from pre-commit hooks (svnlook -t TXN)."""
    id: str

    def __post_init__(self):
        if not isinstance(self.id, str) or not self.id:
            raise ValueError(f"Transaction id must be a non-empty string, got {self.id!r}")

    def to_args(self) -> List[str]:
        return ["-t", self.id]


@dataclass(frozen=True)
class Head:
    """The youngest revision. svnlook defaults to it when no selector is given."""

    def to_args(self) -> List[str]:
        return []


Selector = Union[Revision, Transaction, Head]


def make_selector(
    revision: Optional[Union[int, str]] = None,
    transaction: Optional[str] = None,
) -> Selector:
    """
    Resolve constructor arguments into a Selector.

    Args:
        revision: Revision number (numeric strings are accepted)
        transaction: Transaction id

    Raises:
        ValueError: If both are given, or a value is malformed
    """
    if revision is not None and transaction is not None:
        raise ValueError("Specify a revision or a transaction, not both")

    if revision is not None:
        if isinstance(revision, str):
            if not revision.strip().isdigit():
                raise ValueError(f"Invalid revision number '{revision}'")
            revision = int(revision)
        return Revision(revision)

    if transaction is not None:
        return Transaction(str(transaction))

    return Head()
