"""
Consensus document parser.

Parses microdescriptor consensus documents as described in dir-spec
section 3.4.1. Only the keyword lines needed for guard selection are
interpreted; every other line is skipped.

See: https://spec.torproject.org/dir-spec/consensus-formats.html
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from ipaddress import AddressValueError, IPv4Address

from gants.directory.errors import (
    DateTimeParseError,
    MalformedRelayLine,
    MissingField,
    ParseError,
    UnexpectedVoteStatus,
    UnsupportedDocumentFormatVersion,
)
from gants.directory.flags import FlagSet
from gants.directory.models import ONION_ROUTER_LIMIT, Consensus, Relay

logger = logging.getLogger(__name__)

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

# "r" SP nickname SP identity SP publication(date SP time) SP IP SP ORPort SP DirPort
ROUTER_LINE_MIN_TOKENS = 8


@dataclass
class _ParseState:
    """Values collected while scanning one document."""

    valid_after: datetime | None = None
    valid_until: datetime | None = None
    relays: list[Relay] = field(default_factory=list)
    current: Relay | None = None  # relay whose r line was seen last


class ConsensusParser:
    """Parser for microdescriptor consensus documents."""

    @classmethod
    def parse(cls, content: str | bytes, limit: int = ONION_ROUTER_LIMIT) -> Consensus:
        """
        Parse a consensus document.

        Relays that are not available (see Relay.is_available) are dropped.
        Scanning stops once limit relays have been kept.

        Args:
            content: Raw consensus document
            limit: Maximum number of relays to keep

        Returns:
            Parsed Consensus

        Raises:
            ParseError: If the document is malformed or unsupported
        """
        if isinstance(content, bytes):
            try:
                content = content.decode("utf-8")
            except UnicodeDecodeError as e:
                raise ParseError(f"Consensus is not valid UTF-8: {e}") from e

        state = _ParseState()
        capped = False

        # Lines end at "\n" only, with an optional "\r"
        for line in content.split("\n"):
            line = line.rstrip("\r")
            tokens = line.split()
            if not tokens:
                continue
            keyword = tokens[0]

            if keyword == "network-status-version":
                cls._check_version(tokens)
            elif keyword == "vote-status":
                cls._check_vote_status(tokens)
            elif keyword == "valid-after":
                state.valid_after = cls._parse_datetime("valid-after", tokens)
            elif keyword == "valid-until":
                state.valid_until = cls._parse_datetime("valid-until", tokens)
            elif keyword == "r":
                if cls._finalize(state, limit):
                    capped = True
                    break
                state.current = cls._parse_router_line(line, tokens)
            elif keyword == "s":
                if state.current is None:
                    raise MalformedRelayLine(line, "s line without preceding r line")
                flags = state.current.flags.union(FlagSet.from_labels(tokens[1:]))
                state.current = dataclasses.replace(state.current, flags=flags)

        if capped:
            logger.debug("Relay limit of %d reached, remaining lines skipped", limit)
        else:
            cls._finalize(state, limit)

        if state.valid_after is None:
            raise MissingField("valid-after")
        if state.valid_until is None:
            raise MissingField("valid-until")

        logger.debug("Parsed consensus with %d available relays", len(state.relays))
        return Consensus(
            valid_after=state.valid_after,
            valid_until=state.valid_until,
            relays=tuple(state.relays),
        )

    @staticmethod
    def _finalize(state: _ParseState, limit: int) -> bool:
        """Keep the in-progress relay if available; return True once limit is reached."""
        relay, state.current = state.current, None
        if relay is not None and relay.is_available:
            state.relays.append(relay)
        return len(state.relays) >= limit

    @staticmethod
    def _check_version(tokens: list[str]) -> None:
        """Accept only "network-status-version 3 microdesc"."""
        if len(tokens) != 3 or tokens[1] != "3" or tokens[2] != "microdesc":
            raise UnsupportedDocumentFormatVersion(" ".join(tokens[1:]))

    @staticmethod
    def _check_vote_status(tokens: list[str]) -> None:
        """Accept only "vote-status consensus"."""
        if len(tokens) != 2 or tokens[1] != "consensus":
            raise UnexpectedVoteStatus(" ".join(tokens[1:]))

    @staticmethod
    def _parse_datetime(field_name: str, tokens: list[str]) -> datetime:
        """Parse "<keyword> YYYY-MM-DD HH:MM:SS" as a UTC datetime."""
        if len(tokens) != 3:
            cause = ValueError(f"expected date and time, got {len(tokens) - 1} value(s)")
            raise DateTimeParseError(field_name, cause)
        try:
            naive = datetime.strptime(f"{tokens[1]} {tokens[2]}", DATETIME_FORMAT)
        except ValueError as e:
            raise DateTimeParseError(field_name, e) from e
        return naive.replace(tzinfo=UTC)

    @staticmethod
    def _parse_router_line(line: str, tokens: list[str]) -> Relay:
        """Parse an r line into a Relay with no flags."""
        if len(tokens) < ROUTER_LINE_MIN_TOKENS:
            raise MalformedRelayLine(line, f"expected {ROUTER_LINE_MIN_TOKENS} tokens")

        try:
            ip = IPv4Address(tokens[5])
        except AddressValueError as e:
            raise MalformedRelayLine(line, f"invalid IPv4 address {tokens[5]!r}") from e

        return Relay(
            nickname=tokens[1],
            ip=ip,
            or_port=_parse_port(line, tokens[6]),
            dir_port=_parse_port(line, tokens[7]),
        )


def _parse_port(line: str, value: str) -> int:
    """Parse a port number in range 0-65535."""
    if not (value.isascii() and value.isdigit()):
        raise MalformedRelayLine(line, f"invalid port {value!r}")
    port = int(value)
    if port > 65535:
        raise MalformedRelayLine(line, f"port out of range {value!r}")
    return port


def parse_consensus(content: str | bytes) -> Consensus:
    """Parse a consensus document with the default relay limit."""
    return ConsensusParser.parse(content)
