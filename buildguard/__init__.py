"""Build-time React compatibility guards."""

__version__ = "0.1.0"
