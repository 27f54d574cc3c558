"""Jewelry point-of-sale transaction commitment and memo lifecycle engine."""

__version__ = "1.0.0"
