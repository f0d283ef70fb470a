"""Tribuna: topics, votes and threaded discussion."""

__version__ = "0.1.0"
