"""Authentication gateway for the WebDavHub media server."""

__version__ = "0.1.0"
