"""
HTTP client for fetching directory documents.

This module provides functionality to fetch the microdescriptor consensus
from Tor directory authorities.
"""

import logging
from typing import Optional

import httpx

from gants import __version__
from gants.directory.authority import DirectoryAuthority, get_default_authority

logger = logging.getLogger(__name__)


class DirectoryClient:
    """HTTP client for fetching Tor directory documents."""

    def __init__(
        self,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """
        Initialize the directory client.

        Args:
            timeout: HTTP request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.timeout = timeout
        self.transport = transport

    def fetch_consensus(
        self,
        authority: Optional[DirectoryAuthority] = None,
    ) -> tuple[str, DirectoryAuthority]:
        """
        Fetch the microdescriptor consensus from a directory authority.

        Args:
            authority: Directory authority to fetch from (default authority if None)

        Returns:
            Tuple of (consensus_text, authority_used)

        Raises:
            httpx.HTTPError: If fetch fails
        """
        if authority is None:
            authority = get_default_authority()

        # The body is deflate-compressed on the wire; httpx decodes it
        headers = {
            "Accept-Encoding": "deflate, gzip",
            "User-Agent": f"gants/{__version__}",
        }

        logger.debug("Fetching consensus from %s", authority.consensus_url)
        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            response = client.get(authority.consensus_url, headers=headers, follow_redirects=True)
            response.raise_for_status()
            return response.text, authority
