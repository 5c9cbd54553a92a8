"""Maintenance task due-date classification and daily e-mail digests."""

__version__ = "0.1.0"
