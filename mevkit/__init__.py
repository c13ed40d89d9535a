"""Sui searcher toolkit: Shio auction feed, bid signing, simulation types and chain utilities."""

__version__ = "0.1.0"

__all__ = [
    "bid",
    "coin",
    "links",
    "move_value",
    "runtime",
    "shio_conn",
    "shio_types",
    "simulation",
    "version",
]