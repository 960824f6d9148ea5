"""Quillpad: an AI-assisted editor backend."""

__version__ = "0.1.0"
