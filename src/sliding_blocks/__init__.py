"""Sliding-block (Klotski-style) puzzle engine and optimal solver."""

__version__ = "0.1.0"
