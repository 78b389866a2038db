"""
Data models for directory documents.

This module contains dataclasses for the relays and the consensus built
from a parsed microdescriptor consensus document.
"""

from dataclasses import dataclass, field
from datetime import datetime
from ipaddress import IPv4Address

from gants.directory.flags import Flag, FlagSet

# Maximum number of relays kept from a single consensus
ONION_ROUTER_LIMIT = 100

# Clients should not use relays missing any of these (dir-spec 5.4.1)
STABLE_FLAGS = FlagSet.of(Flag.VALID, Flag.RUNNING, Flag.FAST, Flag.STABLE)


@dataclass(frozen=True)
class Relay:
    """Represents a single router entry in consensus (r line + s line)."""

    nickname: str
    ip: IPv4Address
    or_port: int
    dir_port: int  # 0 means no directory port
    flags: FlagSet = field(default_factory=FlagSet)

    @property
    def address(self) -> str:
        """Get formatted OR address string."""
        return f"{self.ip}:{self.or_port}"

    def has_flag(self, flag: Flag) -> bool:
        """Check if relay has specific flag."""
        return self.flags.contains(flag)

    @property
    def is_guard(self) -> bool:
        """Check if relay is a guard relay."""
        return self.has_flag(Flag.GUARD)

    @property
    def is_exit(self) -> bool:
        """Check if relay is an exit relay."""
        return self.has_flag(Flag.EXIT)

    @property
    def is_stable(self) -> bool:
        """Check if relay is Valid, Running, Fast and Stable."""
        return self.flags.contains_all(STABLE_FLAGS)

    @property
    def is_available(self) -> bool:
        """Check if relay is stable and offers a directory port."""
        return self.is_stable and self.dir_port > 0


@dataclass(frozen=True)
class Consensus:
    """Represents a parsed network consensus document."""

    valid_after: datetime
    valid_until: datetime
    relays: tuple[Relay, ...] = ()

    @property
    def total_relays(self) -> int:
        """Get number of relays kept from the consensus."""
        return len(self.relays)

    def is_valid_at(self, now: datetime) -> bool:
        """Check if the consensus validity window contains now."""
        return self.valid_after <= now <= self.valid_until

    def get_relays_by_flag(self, flag: Flag) -> list[Relay]:
        """Get all relays with a specific flag."""
        return [r for r in self.relays if r.has_flag(flag)]
