"""Shift scheduling service for restaurant staff."""

__version__ = "0.1.0"
