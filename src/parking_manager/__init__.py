"""Parking lot session lifecycle and billing service."""

__version__ = "1.0.0"
