"""Utilities package."""

from skillscout.utils.def_loader import (
    InvalidFrontmatterError,
    discover_definition_dirs,
    has_frontmatter,
    parse_definition,
    parse_frontmatter,
)
from skillscout.utils.logging import setup_logging

__all__ = [
    "InvalidFrontmatterError",
    "discover_definition_dirs",
    "has_frontmatter",
    "parse_definition",
    "parse_frontmatter",
    "setup_logging",
]
