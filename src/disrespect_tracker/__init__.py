"""Disrespect Tracker - log the week's disrespects and wins, share them with friends."""

__version__ = "0.1.0"
