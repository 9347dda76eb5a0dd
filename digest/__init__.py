"""Aggregate a directory tree into one paste-able text digest."""

__version__ = "0.1.0"
