"""
Relay status flags.

The s line of a router status entry lists the flags the authorities
assigned to a relay. Only the labels defined by dir-spec are accepted.

See: https://spec.torproject.org/dir-spec/consensus-formats.html
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import IntFlag

from gants.directory.errors import UnknownFlag


class Flag(IntFlag):
    """Status flags a relay may carry in the consensus."""

    AUTHORITY = 1 << 0
    BAD_EXIT = 1 << 1
    EXIT = 1 << 2
    FAST = 1 << 3
    GUARD = 1 << 4
    HS_DIR = 1 << 5
    MIDDLE_ONLY = 1 << 6
    NO_ED_CONSENSUS = 1 << 7
    STABLE = 1 << 8
    STALE_DESC = 1 << 9
    RUNNING = 1 << 10
    VALID = 1 << 11
    V2DIR = 1 << 12

    @property
    def label(self) -> str:
        """Get the label used for this flag in consensus documents."""
        return _FLAG_TO_LABEL[self]


_LABEL_TO_FLAG: dict[str, Flag] = {
    "Authority": Flag.AUTHORITY,
    "BadExit": Flag.BAD_EXIT,
    "Exit": Flag.EXIT,
    "Fast": Flag.FAST,
    "Guard": Flag.GUARD,
    "HSDir": Flag.HS_DIR,
    "MiddleOnly": Flag.MIDDLE_ONLY,
    "NoEdConsensus": Flag.NO_ED_CONSENSUS,
    "Stable": Flag.STABLE,
    "StaleDesc": Flag.STALE_DESC,
    "Running": Flag.RUNNING,
    "Valid": Flag.VALID,
    "V2Dir": Flag.V2DIR,
}

_FLAG_TO_LABEL: dict[Flag, str] = {flag: label for label, flag in _LABEL_TO_FLAG.items()}

# Single-bit members in bit order
_ALL_FLAGS: tuple[Flag, ...] = tuple(sorted(_LABEL_TO_FLAG.values()))


def from_label(label: str) -> Flag:
    """
    Map a consensus flag label to its Flag.

    Args:
        label: Flag label exactly as it appears on an s line (case-sensitive)

    Returns:
        The matching Flag

    Raises:
        UnknownFlag: If the label is not one of the known flags
    """
    try:
        return _LABEL_TO_FLAG[label]
    except KeyError:
        raise UnknownFlag(label) from None


@dataclass(frozen=True)
class FlagSet:
    """Immutable set of relay flags stored as a bitmask."""

    bits: Flag = Flag(0)

    @classmethod
    def of(cls, *flags: Flag) -> FlagSet:
        """Build a set from individual flags."""
        bits = Flag(0)
        for flag in flags:
            bits |= flag
        return cls(bits)

    @classmethod
    def from_labels(cls, labels: Iterable[str]) -> FlagSet:
        """
        Build a set from consensus labels.

        Raises:
            UnknownFlag: If any label is not a known flag
        """
        return cls.of(*(from_label(label) for label in labels))

    def insert(self, flag: Flag) -> FlagSet:
        """Return a new set that also contains flag."""
        return FlagSet(self.bits | flag)

    def union(self, other: FlagSet) -> FlagSet:
        """Return the union of both sets."""
        return FlagSet(self.bits | other.bits)

    def contains(self, flag: Flag) -> bool:
        """Check if the set contains a single flag."""
        return bool(self.bits & flag)

    def contains_all(self, other: FlagSet) -> bool:
        """Check if every flag of other is in this set."""
        return (self.bits & other.bits) == other.bits

    def labels(self) -> list[str]:
        """Get the labels of all flags in bit order."""
        return [flag.label for flag in self]

    def __iter__(self) -> Iterator[Flag]:
        return (flag for flag in _ALL_FLAGS if self.bits & flag)

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __contains__(self, flag: object) -> bool:
        return isinstance(flag, Flag) and self.contains(flag)

    def __str__(self) -> str:
        return " ".join(self.labels())
