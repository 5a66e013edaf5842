"""Guildhall: quest lifecycle simulation for a hero guild."""

__version__ = "0.1.0"
