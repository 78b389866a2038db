"""
Test fixtures for gants tests.

This module contains sample documents for testing consensus parsing,
caching and guard selection.
"""

from datetime import UTC, datetime

PREAMBLE = """network-status-version 3 microdesc
vote-status consensus
consensus-method 33
valid-after 2024-01-01 00:00:00
fresh-until 2024-01-01 01:00:00
valid-until 2024-01-02 00:00:00
voting-delay 300 300
known-flags Authority BadExit Exit Fast Guard HSDir MiddleOnly Running Stable StaleDesc V2Dir Valid
"""

# One available guard relay
SAMPLE_CONSENSUS = (
    PREAMBLE
    + """r relayA AAAAAAAAAAAAAAAAAAAAAAAAAAA 2024-01-01 00:00:00 10.0.0.1 9001 9030
m sha256=dGVzdA
s Fast Guard Running Stable Valid
v Tor 0.4.8.10
pr Link=1-5 Cons=1-2
w Bandwidth=5000
directory-footer
bandwidth-weights Wbd=285 Wbe=0 Wbg=0 Wbm=10000
"""
)

# Same relay without the Valid flag
SAMPLE_CONSENSUS_NOT_VALID = (
    PREAMBLE
    + """r relayA AAAAAAAAAAAAAAAAAAAAAAAAAAA 2024-01-01 00:00:00 10.0.0.1 9001 9030
s Fast Guard Running Stable
"""
)

# Mixed relays: only Exit1 and Guard1 are available
SAMPLE_CONSENSUS_MIXED = (
    PREAMBLE
    + """r Exit1 AAAAAAAAAAAAAAAAAAAAAAAAAAA 2024-01-01 00:00:00 192.0.2.1 9001 9030
s Exit Fast Running Stable Valid
r NoDirPort BBBBBBBBBBBBBBBBBBBBBBBBBBB 2024-01-01 00:00:00 192.0.2.2 9001 0
s Fast Guard Running Stable Valid
r NotRunning CCCCCCCCCCCCCCCCCCCCCCCCCCC 2024-01-01 00:00:00 192.0.2.3 443 80
s Fast Guard Stable Valid
r Guard1 DDDDDDDDDDDDDDDDDDDDDDDDDDD 2024-01-01 00:00:00 192.0.2.4 443 80
s Fast Guard HSDir Running Stable V2Dir Valid
r NoFlags EEEEEEEEEEEEEEEEEEEEEEEEEEE 2024-01-01 00:00:00 192.0.2.5 443 80
"""
)

VALID_AFTER = datetime(2024, 1, 1, 0, 0, 0, tzinfo=UTC)
VALID_UNTIL = datetime(2024, 1, 2, 0, 0, 0, tzinfo=UTC)


def router_line(nickname: str, ip: str = "10.0.0.1", or_port: int = 9001, dir_port: int = 9030) -> str:
    """Build an r line of a microdescriptor consensus."""
    return f"r {nickname} AAAAAAAAAAAAAAAAAAAAAAAAAAA 2024-01-01 00:00:00 {ip} {or_port} {dir_port}"


def build_consensus(relays: list[tuple[str, str]], preamble: str = PREAMBLE) -> str:
    """Build a document from (nickname, s line flags) pairs."""
    lines = [preamble.rstrip("\n")]
    for i, (nickname, flags) in enumerate(relays):
        lines.append(router_line(nickname, ip=f"10.0.{i // 256}.{i % 256}"))
        lines.append(f"s {flags}")
    return "\n".join(lines) + "\n"
