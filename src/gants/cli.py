"""
CLI interface for gants.

Loads the network consensus (from cache or a directory authority) and
picks guard relays from it.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from typing import Optional

import httpx

from gants import __version__, output
from gants.cache import ConsensusCache
from gants.cli_helpers import format_flags, resolve_relay_or_fail
from gants.config import Settings
from gants.directory.authority import get_authority_by_nickname
from gants.directory.client import DirectoryClient
from gants.directory.consensus import ConsensusParser
from gants.directory.errors import GantsError, ParseError
from gants.directory.flags import Flag, FlagSet
from gants.directory.models import Consensus
from gants.path import RelaySelector

# Errors reported as "Error: ..." by command handlers
COMMAND_ERRORS = (GantsError, httpx.HTTPError, ValueError)


def get_consensus(
    settings: Settings,
    no_cache: bool = False,
    now: Optional[datetime] = None,
    client: Optional[DirectoryClient] = None,
) -> Consensus:
    """
    Get consensus from cache or fetch from network.

    A freshly fetched document is written to the cache after it parsed.

    Args:
        settings: Runtime settings
        no_cache: If True, bypass cache and always fetch
        now: Current time (defaults to now in UTC)
        client: Directory client (one using settings.timeout if None)

    Returns:
        Consensus

    Raises:
        httpx.HTTPError: If fetch fails
        ParseError: If the fetched document is invalid
        CacheError: If the fetched document could not be cached
    """
    if now is None:
        now = datetime.now(UTC)
    cache = ConsensusCache(settings.cache_dir)

    output.explain("Loading network consensus (list of Tor relays)")

    if not no_cache:
        output.verbose(f"Checking local cache in {settings.cache_dir}")
        document = cache.get(now)
        if document is not None:
            try:
                consensus = ConsensusParser.parse(document)
            except ParseError as e:
                output.verbose(f"Ignoring unparseable cached consensus: {e}")
            else:
                print(
                    f"Using cached network consensus ({consensus.total_relays} relays)",
                    file=sys.stderr,
                )
                return consensus

    authority = get_authority_by_nickname(settings.authority)
    if authority is None:
        raise ValueError(f"Unknown directory authority: {settings.authority}")

    output.explain("Fetching consensus from directory authority")
    if client is None:
        client = DirectoryClient(timeout=settings.timeout)
    document, used_authority = client.fetch_consensus(authority)
    output.verbose(f"Fetched consensus from {used_authority.nickname}")

    consensus = ConsensusParser.parse(document)
    output.debug(f"Consensus size: {len(document)} chars, {consensus.total_relays} relays kept")
    print(
        f"Fetched network consensus ({consensus.total_relays} relays) "
        f"from {used_authority.nickname} (authority)",
        file=sys.stderr,
    )

    cache.put(document, consensus.valid_until)

    if not consensus.is_valid_at(now):
        print(
            f"Warning: consensus is valid from {consensus.valid_after} "
            f"until {consensus.valid_until}, not now",
            file=sys.stderr,
        )

    return consensus


def cmd_version(args: argparse.Namespace) -> int:  # pylint: disable=unused-argument
    """Display the gants version."""
    print(__version__)
    return 0


def cmd_clear(args: argparse.Namespace) -> int:  # pylint: disable=unused-argument
    """Clear the cached consensus."""
    settings = Settings.from_env()
    ConsensusCache(settings.cache_dir).clear()
    print("Cache cleared.")
    return 0


def cmd_consensus(args: argparse.Namespace) -> int:
    """Show a summary of the network consensus."""
    try:
        settings = Settings.from_env()
        consensus = get_consensus(settings, no_cache=args.no_cache)

        print("\nNetwork Consensus:")
        print("=" * 70)
        print(f"  Valid after:  {consensus.valid_after} UTC")
        print(f"  Valid until:  {consensus.valid_until} UTC")
        print(f"  Relays:       {consensus.total_relays} (available relays only)")
        print(f"  Guards:       {len(consensus.get_relays_by_flag(Flag.GUARD))}")
        return 0

    except COMMAND_ERRORS as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_relays(args: argparse.Namespace) -> int:
    """List relays from network consensus."""
    try:
        settings = Settings.from_env()
        consensus = get_consensus(settings)

        relays = list(consensus.relays)
        if args.flags:
            wanted = FlagSet.from_labels(f.strip() for f in args.flags.split(","))
            output.verbose(f"Filtering relays by flags: {wanted}")
            relays = [r for r in relays if r.flags.contains_all(wanted)]
            output.verbose(f"Found {len(relays)} relays matching flags")

        print(f"\nRelays ({len(relays)} total):\n")
        print(f"{'Nickname':<20} {'Address':<22} {'Flags'}")
        print("-" * 70)

        for relay in relays:
            nickname = relay.nickname[:17] + "..." if len(relay.nickname) > 20 else relay.nickname
            print(f"{nickname:<20} {relay.address:<22} {format_flags(relay)}")

        return 0

    except COMMAND_ERRORS as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_relay(args: argparse.Namespace) -> int:
    """Show details for a specific relay."""
    try:
        settings = Settings.from_env()
        consensus = get_consensus(settings)

        output.verbose(f"Searching for relay: {args.query}")
        relay = resolve_relay_or_fail(consensus, args.query)
        if relay is None:
            return 1

        print(f"\nRelay: {relay.nickname}")
        print("=" * 70)
        print(f"  Address:      {relay.address}")
        print(f"  DirPort:      {relay.dir_port}")
        print(f"  Flags:        {', '.join(relay.flags.labels())}")
        return 0

    except COMMAND_ERRORS as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_guard(args: argparse.Namespace) -> int:
    """Choose a guard relay."""
    try:
        settings = Settings.from_env()
        consensus = get_consensus(settings, no_cache=args.no_cache)

        output.explain("Sampling random relays until one carries the Guard flag")
        guard = RelaySelector().choose_guard(consensus)

        print(f"Guard: {guard.nickname} ({guard.address})")
        return 0

    except COMMAND_ERRORS as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the gants CLI."""
    parser = argparse.ArgumentParser(
        prog="gants",
        description="Tor directory consensus client",
    )

    # Global flags (available on all commands)
    parser.add_argument(
        "-e", "--explain", action="store_true", help="Show brief explanations of what's happening"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for progress, -vv for debug)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="", title="commands")

    # version command
    subparsers.add_parser("version", help="Display the gants version")

    # clear command
    subparsers.add_parser("clear", help="Clear cache")

    # consensus command
    consensus_parser = subparsers.add_parser("consensus", help="Show network consensus summary")
    consensus_parser.add_argument("--no-cache", action="store_true", help="Always fetch")

    # relays command
    relays_parser = subparsers.add_parser("relays", help="List relays from network consensus")
    relays_parser.add_argument("--flags", metavar="FLAGS", help="Filter by flags (comma-separated)")

    # relay command
    relay_parser = subparsers.add_parser("relay", help="Show a specific relay")
    relay_parser.add_argument("query", metavar="nickname", help="Relay nickname")

    # guard command
    guard_parser = subparsers.add_parser("guard", help="Choose a guard relay")
    guard_parser.add_argument("--no-cache", action="store_true", help="Always fetch")

    args = parser.parse_args(argv)

    # -v enables verbose, -vv enables both verbose and debug
    verbosity = args.verbose
    output.configure(
        explain=args.explain,
        verbose=verbosity >= 1,
        debug=verbosity >= 2,
    )

    if args.command is None:
        parser.print_help()
        return 0

    # Dispatch to command handler
    commands: dict[str, Callable[[argparse.Namespace], int]] = {
        "version": cmd_version,
        "clear": cmd_clear,
        "consensus": cmd_consensus,
        "relays": cmd_relays,
        "relay": cmd_relay,
        "guard": cmd_guard,
    }

    try:
        return commands[args.command](args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
