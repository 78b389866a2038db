"""
Directory authority information.

Gants fetches the consensus straight from one of the hardcoded
directory authorities.
"""

from dataclasses import dataclass
from typing import Optional

# Authority used when none is configured
DEFAULT_AUTHORITY = "maatuska"


@dataclass(frozen=True)
class DirectoryAuthority:
    """Directory authority information."""

    nickname: str
    ip: str
    dirport: int
    orport: int

    @property
    def http_url(self) -> str:
        """Get base HTTP URL for directory requests."""
        return f"http://{self.ip}:{self.dirport}"

    @property
    def address(self) -> str:
        """Get formatted address string."""
        return f"{self.ip}:{self.dirport}"

    @property
    def consensus_url(self) -> str:
        """Get URL of the current microdescriptor consensus."""
        return f"{self.http_url}/tor/status-vote/current/consensus-microdesc"


# https://consensus-health.torproject.org/
DIRECTORY_AUTHORITIES = [
    DirectoryAuthority(nickname="moria1", ip="128.31.0.39", dirport=9231, orport=9201),
    DirectoryAuthority(nickname="tor26", ip="217.196.147.77", dirport=80, orport=443),
    DirectoryAuthority(nickname="dizum", ip="45.66.35.11", dirport=80, orport=443),
    DirectoryAuthority(nickname="gabelmoo", ip="131.188.40.189", dirport=80, orport=443),
    DirectoryAuthority(nickname="dannenberg", ip="193.23.244.244", dirport=80, orport=443),
    DirectoryAuthority(nickname="maatuska", ip="171.25.193.9", dirport=443, orport=80),
    DirectoryAuthority(nickname="longclaw", ip="199.58.81.140", dirport=80, orport=443),
    DirectoryAuthority(nickname="bastet", ip="204.13.164.118", dirport=80, orport=443),
    DirectoryAuthority(nickname="faravahar", ip="216.218.219.41", dirport=80, orport=443),
]


def get_authority_by_nickname(nickname: str) -> Optional[DirectoryAuthority]:
    """Get directory authority by nickname (case-insensitive)."""
    for auth in DIRECTORY_AUTHORITIES:
        if auth.nickname.lower() == nickname.lower():
            return auth
    return None


def get_default_authority() -> DirectoryAuthority:
    """Get the authority used when none is specified."""
    return next(a for a in DIRECTORY_AUTHORITIES if a.nickname == DEFAULT_AUTHORITY)
