# src/gred/__init__.py
"""gred: a grapheme-aware terminal text editor."""

NAME = "gred"
__version__ = "0.1.0"
