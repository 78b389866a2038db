"""
CLI helper functions for gants.

These functions extract common patterns from the CLI to reduce code duplication.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gants.directory.models import Consensus, Relay


def find_relay(consensus: Consensus, query: str) -> Relay | None:
    """
    Find relay by nickname.

    Nicknames are not unique; the first match in consensus order wins.

    Args:
        consensus: Network consensus
        query: Nickname (case-insensitive)

    Returns:
        Relay if found, None otherwise
    """
    query_upper = query.strip().upper()
    for r in consensus.relays:
        if r.nickname.upper() == query_upper:
            return r
    return None


def resolve_relay_or_fail(consensus: Consensus, query: str) -> Relay | None:
    """
    Find relay by nickname, printing error message if not found.

    Returns:
        Relay if found, None otherwise (with error printed to stderr)
    """
    relay = find_relay(consensus, query)
    if relay is None:
        print(f"Relay not found: {query}", file=sys.stderr)
    return relay


def format_flags(relay: Relay) -> str:
    """Format relay flags as a comma-separated list."""
    return ",".join(relay.flags.labels())
