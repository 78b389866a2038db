"""
Exceptions raised while handling directory documents.

Every failure caused by document content is reported as a ParseError
subclass so callers can reject a consensus without the process aborting.
"""

from __future__ import annotations


class GantsError(Exception):
    """Base class for all gants errors."""


class ParseError(GantsError, ValueError):
    """A consensus document could not be parsed."""


class UnsupportedDocumentFormatVersion(ParseError):
    """The network-status-version line is not "3 microdesc"."""

    def __init__(self, found: str) -> None:
        self.found = found
        super().__init__(f"Unsupported document format version: {found!r}")


class UnexpectedVoteStatus(ParseError):
    """The vote-status line is not "consensus"."""

    def __init__(self, found: str) -> None:
        self.found = found
        super().__init__(f"Unexpected vote status: {found!r}")


class DateTimeParseError(ParseError):
    """A valid-after or valid-until value is not a valid timestamp."""

    def __init__(self, field: str, cause: Exception) -> None:
        self.field = field
        self.cause = cause
        super().__init__(f"Invalid {field} timestamp: {cause}")


class MissingField(ParseError):
    """A required keyword line never appeared in the document."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Missing required field: {field}")


class UnknownFlag(ParseError):
    """A status flag label outside the known vocabulary."""

    def __init__(self, label: str) -> None:
        self.label = label
        super().__init__(f"Unknown relay flag: {label!r}")


class MalformedRelayLine(ParseError):
    """An r or s line is missing tokens or has an unparseable address or port."""

    def __init__(self, line: str, reason: str) -> None:
        self.line = line
        self.reason = reason
        super().__init__(f"Malformed relay line ({reason}): {line!r}")


class SelectionError(GantsError):
    """No relay could be selected."""


class NoGuardFound(SelectionError):
    """Guard sampling ran out of attempts."""

    def __init__(self, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(f"Could not find a guard relay after {attempts} attempts")


class CacheError(GantsError):
    """The consensus cache could not be written."""
