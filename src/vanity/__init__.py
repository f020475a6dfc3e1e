"""Vanity: content tooling for a personal reading ledger and its static export."""

__version__ = "1.0.0"
__all__ = ["__version__"]
