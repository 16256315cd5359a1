"""Spin wheel: a weighted random picker with a spinning wheel."""

__version__ = "0.1.0"
