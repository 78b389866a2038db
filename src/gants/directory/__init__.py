"""Directory protocol implementation for Tor."""

from gants.directory.authority import (
    DIRECTORY_AUTHORITIES,
    DirectoryAuthority,
    get_authority_by_nickname,
    get_default_authority,
)
from gants.directory.client import DirectoryClient
from gants.directory.consensus import ConsensusParser, parse_consensus
from gants.directory.errors import (
    CacheError,
    DateTimeParseError,
    GantsError,
    MalformedRelayLine,
    MissingField,
    NoGuardFound,
    ParseError,
    SelectionError,
    UnexpectedVoteStatus,
    UnknownFlag,
    UnsupportedDocumentFormatVersion,
)
from gants.directory.flags import Flag, FlagSet, from_label
from gants.directory.models import ONION_ROUTER_LIMIT, Consensus, Relay

__all__ = [
    "DIRECTORY_AUTHORITIES",
    "DirectoryAuthority",
    "get_authority_by_nickname",
    "get_default_authority",
    "DirectoryClient",
    "ConsensusParser",
    "parse_consensus",
    "CacheError",
    "DateTimeParseError",
    "GantsError",
    "MalformedRelayLine",
    "MissingField",
    "NoGuardFound",
    "ParseError",
    "SelectionError",
    "UnexpectedVoteStatus",
    "UnknownFlag",
    "UnsupportedDocumentFormatVersion",
    "Flag",
    "FlagSet",
    "from_label",
    "ONION_ROUTER_LIMIT",
    "Consensus",
    "Relay",
]
