"""Tailor Mate backend: document intake and client archive for tailoring ateliers."""

__version__ = "0.1.0"
