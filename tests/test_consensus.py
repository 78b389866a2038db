"""Tests for the consensus document parser."""

from ipaddress import IPv4Address

import pytest

from fixtures import (
    PREAMBLE,
    SAMPLE_CONSENSUS,
    SAMPLE_CONSENSUS_MIXED,
    SAMPLE_CONSENSUS_NOT_VALID,
    VALID_AFTER,
    VALID_UNTIL,
    build_consensus,
    router_line,
)
from gants.directory.consensus import ConsensusParser, parse_consensus
from gants.directory.errors import (
    DateTimeParseError,
    MalformedRelayLine,
    MissingField,
    ParseError,
    UnexpectedVoteStatus,
    UnknownFlag,
    UnsupportedDocumentFormatVersion,
)
from gants.directory.flags import Flag, FlagSet
from gants.directory.models import ONION_ROUTER_LIMIT, Relay

STABLE_LABELS = "Fast Running Stable Valid"


class TestParseSample:
    """Tests for parsing well-formed documents."""

    def test_validity_window(self) -> None:
        """Test valid-after and valid-until are parsed as UTC."""
        consensus = ConsensusParser.parse(SAMPLE_CONSENSUS)
        assert consensus.valid_after == VALID_AFTER
        assert consensus.valid_until == VALID_UNTIL
        assert consensus.valid_after <= consensus.valid_until
        assert consensus.valid_after.utcoffset() is not None

    def test_single_relay(self) -> None:
        """Test the relay fields of the r and s lines."""
        consensus = ConsensusParser.parse(SAMPLE_CONSENSUS)
        assert consensus.relays == (
            Relay(
                nickname="relayA",
                ip=IPv4Address("10.0.0.1"),
                or_port=9001,
                dir_port=9030,
                flags=FlagSet.of(Flag.FAST, Flag.GUARD, Flag.RUNNING, Flag.STABLE, Flag.VALID),
            ),
        )

    def test_bytes_input(self) -> None:
        """Test that bytes are decoded as UTF-8."""
        consensus = ConsensusParser.parse(SAMPLE_CONSENSUS.encode("utf-8"))
        assert consensus.total_relays == 1

    def test_invalid_utf8(self) -> None:
        """Test that undecodable bytes raise ParseError."""
        with pytest.raises(ParseError):
            ConsensusParser.parse(b"network-status-version 3 microdesc\n\xff\xfe\n")

    def test_idempotent(self) -> None:
        """Test that parsing the same text twice gives equal results."""
        assert parse_consensus(SAMPLE_CONSENSUS_MIXED) == parse_consensus(SAMPLE_CONSENSUS_MIXED)

    def test_relay_without_valid_is_dropped(self) -> None:
        """Test a relay missing the Valid flag is not kept."""
        consensus = ConsensusParser.parse(SAMPLE_CONSENSUS_NOT_VALID)
        assert consensus.relays == ()

    def test_availability_filter(self) -> None:
        """Test only stable relays with a directory port are kept, in order."""
        consensus = ConsensusParser.parse(SAMPLE_CONSENSUS_MIXED)
        assert [r.nickname for r in consensus.relays] == ["Exit1", "Guard1"]
        assert all(r.is_available for r in consensus.relays)

    def test_unknown_keywords_ignored(self) -> None:
        """Test that unrecognized keyword lines are skipped."""
        document = SAMPLE_CONSENSUS + "some-future-keyword a b c\n\n   \n"
        assert ConsensusParser.parse(document) == ConsensusParser.parse(SAMPLE_CONSENSUS)

    @pytest.mark.parametrize(
        "extra",
        [
            "future-keyword a\u2028s BogusFlag\n",
            "v Tor\x0cvalid-until garbage 1\n",
            "future-keyword\x85r x A 2024-01-01 00:00:00 bad 1 1\n",
            "future-keyword s Fast\x1cs Nope\x0bvalid-after x\n",
        ],
    )
    def test_only_newline_ends_a_line(self, extra: str) -> None:
        """Test that other line separators stay inside an ignored line."""
        assert ConsensusParser.parse(SAMPLE_CONSENSUS + extra) == ConsensusParser.parse(
            SAMPLE_CONSENSUS
        )

    def test_crlf_line_endings(self) -> None:
        """Test that documents with CRLF line endings parse the same."""
        document = SAMPLE_CONSENSUS.replace("\n", "\r\n")
        assert ConsensusParser.parse(document) == ConsensusParser.parse(SAMPLE_CONSENSUS)

    def test_multiple_s_lines_accumulate(self) -> None:
        """Test that flags from repeated s lines are merged."""
        document = PREAMBLE + router_line("split") + "\ns Fast Running\ns Stable Valid\n"
        consensus = ConsensusParser.parse(document)
        assert consensus.relays[0].flags == FlagSet.from_labels(STABLE_LABELS.split())

    def test_empty_s_line(self) -> None:
        """Test that an s line with no flags is accepted."""
        document = PREAMBLE + router_line("bare") + "\ns\n"
        assert ConsensusParser.parse(document).relays == ()

    def test_extra_r_tokens_allowed(self) -> None:
        """Test that r lines may carry more than eight tokens."""
        document = PREAMBLE + router_line("extra") + " trailing\ns " + STABLE_LABELS + "\n"
        assert ConsensusParser.parse(document).relays[0].nickname == "extra"


class TestRelayLimit:
    """Tests for the cap on kept relays."""

    def test_cap_at_limit(self) -> None:
        """Test that at most ONION_ROUTER_LIMIT relays are kept."""
        relays = [(f"relay{i}", STABLE_LABELS) for i in range(ONION_ROUTER_LIMIT + 50)]
        consensus = ConsensusParser.parse(build_consensus(relays))
        assert consensus.total_relays == ONION_ROUTER_LIMIT
        assert consensus.relays[-1].nickname == f"relay{ONION_ROUTER_LIMIT - 1}"

    def test_lines_after_cap_not_processed(self) -> None:
        """Test that scanning stops once the limit is reached."""
        relays = [(f"relay{i}", STABLE_LABELS) for i in range(ONION_ROUTER_LIMIT + 1)]
        # An unknown flag after the cap would fail if it were parsed
        document = build_consensus(relays) + "s BogusFlag\n"
        consensus = ConsensusParser.parse(document)
        assert consensus.total_relays == ONION_ROUTER_LIMIT

    def test_unavailable_relays_do_not_count(self) -> None:
        """Test that dropped relays are not counted toward the limit."""
        relays = [("bad", "Fast")] * 20 + [(f"ok{i}", STABLE_LABELS) for i in range(10)]
        consensus = ConsensusParser.parse(build_consensus(relays))
        assert [r.nickname for r in consensus.relays] == [f"ok{i}" for i in range(10)]

    def test_custom_limit(self) -> None:
        """Test a smaller limit."""
        relays = [(f"relay{i}", STABLE_LABELS) for i in range(5)]
        consensus = ConsensusParser.parse(build_consensus(relays), limit=2)
        assert [r.nickname for r in consensus.relays] == ["relay0", "relay1"]


class TestHeaderErrors:
    """Tests for preamble errors."""

    @pytest.mark.parametrize(
        "line",
        [
            "network-status-version 3",
            "network-status-version 2 microdesc",
            "network-status-version 3 ns",
            "network-status-version 3 microdesc extra",
        ],
    )
    def test_unsupported_version(self, line: str) -> None:
        """Test that anything but "3 microdesc" is rejected."""
        document = SAMPLE_CONSENSUS.replace("network-status-version 3 microdesc", line)
        with pytest.raises(UnsupportedDocumentFormatVersion) as exc_info:
            ConsensusParser.parse(document)
        assert exc_info.value.found == line.split(" ", 1)[1]

    def test_unexpected_vote_status(self) -> None:
        """Test that vote documents are rejected."""
        document = SAMPLE_CONSENSUS.replace("vote-status consensus", "vote-status vote")
        with pytest.raises(UnexpectedVoteStatus) as exc_info:
            ConsensusParser.parse(document)
        assert exc_info.value.found == "vote"

    @pytest.mark.parametrize(
        ("field", "line"),
        [
            ("valid-after", "valid-after 2024-13-01 00:00:00"),
            ("valid-after", "valid-after 2024-01-01"),
            ("valid-until", "valid-until yesterday 00:00:00"),
        ],
    )
    def test_bad_datetime(self, field: str, line: str) -> None:
        """Test malformed timestamps name the offending field."""
        document = "\n".join(
            line if existing.startswith(field + " ") else existing
            for existing in SAMPLE_CONSENSUS.splitlines()
        )
        with pytest.raises(DateTimeParseError) as exc_info:
            ConsensusParser.parse(document)
        assert exc_info.value.field == field

    @pytest.mark.parametrize("field", ["valid-after", "valid-until"])
    def test_missing_field(self, field: str) -> None:
        """Test that an absent timestamp raises MissingField."""
        document = "\n".join(
            line for line in SAMPLE_CONSENSUS.splitlines() if not line.startswith(field + " ")
        )
        with pytest.raises(MissingField) as exc_info:
            ConsensusParser.parse(document)
        assert exc_info.value.field == field

    def test_empty_document(self) -> None:
        """Test that an empty document is missing its fields."""
        with pytest.raises(MissingField):
            ConsensusParser.parse("")


class TestRelayErrors:
    """Tests for r and s line errors."""

    def test_unknown_flag(self) -> None:
        """Test that an unknown flag label raises UnknownFlag."""
        document = PREAMBLE + router_line("relayA") + "\ns Fast BogusFlag\n"
        with pytest.raises(UnknownFlag) as exc_info:
            ConsensusParser.parse(document)
        assert exc_info.value.label == "BogusFlag"

    def test_s_line_without_relay(self) -> None:
        """Test that an s line before any r line is rejected."""
        with pytest.raises(MalformedRelayLine):
            ConsensusParser.parse(PREAMBLE + "s Fast Guard\n")

    @pytest.mark.parametrize(
        "line",
        [
            "r short AAAA 2024-01-01 00:00:00 10.0.0.1 9001",
            router_line("badip", ip="10.0.0.256"),
            router_line("v6", ip="::1"),
            router_line("badport", or_port=65536),
            "r neg AAAAAAAAAAAAAAAAAAAAAAAAAAA 2024-01-01 00:00:00 10.0.0.1 -1 9030",
            "r word AAAAAAAAAAAAAAAAAAAAAAAAAAA 2024-01-01 00:00:00 10.0.0.1 9001 http",
        ],
    )
    def test_malformed_router_line(self, line: str) -> None:
        """Test malformed r lines raise MalformedRelayLine."""
        with pytest.raises(MalformedRelayLine) as exc_info:
            ConsensusParser.parse(PREAMBLE + line + "\n")
        assert exc_info.value.line == line

    def test_errors_are_value_errors(self) -> None:
        """Test that parse errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            ConsensusParser.parse(PREAMBLE + "s Fast\n")
