"""Canonicalizing formatter for the Wryneck toy language."""

__version__ = "0.1.0"
