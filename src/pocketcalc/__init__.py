"""A small desktop calculator built on Qt."""

__version__ = "1.0.0"
