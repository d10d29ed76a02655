"""Litera: social reading tracker backend."""

__version__ = "0.1.0"
