"""Skill discovery, matching and progressive-disclosure retrieval."""

__version__ = "0.1.0"
