"""questtracker - FFXIV quest graph loader and query surface."""

__version__ = "0.1.0"
