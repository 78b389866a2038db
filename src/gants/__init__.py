"""
gants - A Tor directory consensus client.

Gants fetches the microdescriptor consensus from a directory authority,
keeps it in a local cache until it expires, and picks guard relays from it.
"""

__version__ = "0.1.0"
