"""Detects hosts whose metrics have stopped being posted to Mackerel."""

__version__ = "0.1.0"
