"""
Relay selection for circuit paths.

Guards are picked by rejection sampling: draw a random relay and keep it
if it carries the Guard flag. No filtered list is ever built, so the cost
stays constant as long as guards are not rare in the consensus.
"""

from __future__ import annotations

import logging
import random
from typing import Optional

from gants.directory.errors import NoGuardFound
from gants.directory.flags import Flag
from gants.directory.models import Consensus, Relay

logger = logging.getLogger(__name__)

# Number of random draws before giving up on finding a guard
MAX_GUARD_ATTEMPTS = 100


class RelaySelector:
    """Selects relays from a consensus by uniform random sampling."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        max_attempts: int = MAX_GUARD_ATTEMPTS,
    ) -> None:
        """
        Initialize the selector.

        Args:
            rng: Random number generator (a SystemRandom if None)
            max_attempts: Maximum number of draws per selection
        """
        self.rng = rng if rng is not None else random.SystemRandom()
        self.max_attempts = max_attempts

    def choose_guard(self, consensus: Consensus) -> Relay:
        """
        Choose a relay with the Guard flag.

        Every index in [0, len(relays)) can be drawn.

        Args:
            consensus: Parsed consensus

        Returns:
            A relay carrying the Guard flag

        Raises:
            NoGuardFound: If no guard was drawn within max_attempts
        """
        relays = consensus.relays
        if not relays:
            raise NoGuardFound(0)

        for attempt in range(1, self.max_attempts + 1):
            relay = relays[self.rng.randrange(len(relays))]
            if relay.has_flag(Flag.GUARD):
                logger.debug("Picked %s after %d draw(s)", relay.nickname, attempt)
                return relay

        raise NoGuardFound(self.max_attempts)


def choose_guard(consensus: Consensus) -> Relay:
    """Choose a guard relay with a default selector."""
    return RelaySelector().choose_guard(consensus)
