"""Shared utilities for loading definition files (skill overviews, references)."""

import logging
from pathlib import Path
from typing import Any, Callable, TypeVar

import yaml

T = TypeVar("T")
logger = logging.getLogger(__name__)


class InvalidFrontmatterError(ValueError):
    """Frontmatter block exists but is not a YAML mapping."""


def split_frontmatter(content: str) -> tuple[str | None, str]:
    """
    Split raw file content into frontmatter text and body.

    Args:
        content: Raw file content

    Returns:
        (frontmatter_text, body). frontmatter_text is None when the content
        has no delimited frontmatter block.
    """
    content = content.replace("\r\n", "\n")

    # Find frontmatter delimiters
    if not content.startswith("---\n"):
        return None, content

    end_delimiter = content.find("\n---\n", 3)
    if end_delimiter == -1:
        if content.endswith("\n---"):
            return content[4 : len(content) - 4], ""
        return None, content

    frontmatter_text = content[4:end_delimiter]
    body = content[end_delimiter + 5 :]
    return frontmatter_text, body


def has_frontmatter(content: str) -> bool:
    """Return True if content opens with a delimited frontmatter block."""
    frontmatter_text, _ = split_frontmatter(content)
    return frontmatter_text is not None


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """
    Parse YAML frontmatter + markdown body.

    Returns:
        (frontmatter dict, body). The dict is empty when there is no frontmatter.

    Raises:
        InvalidFrontmatterError: If the frontmatter is not a YAML mapping
        yaml.YAMLError: If the frontmatter is not valid YAML
    """
    frontmatter_text, body = split_frontmatter(content)
    if frontmatter_text is None:
        return {}, body

    raw = yaml.safe_load(frontmatter_text) or {}
    if not isinstance(raw, dict):
        raise InvalidFrontmatterError(
            f"frontmatter must be a mapping, got {type(raw).__name__}"
        )
    return raw, body


def parse_definition(
    content: str,
    def_path: Path,
    parse_fn: Callable[[Path, dict[str, Any], str], T],
) -> T:
    """
    Parse YAML frontmatter + markdown body with type conversion.

    Args:
        content: Raw file content
        def_path: Definition directory (passed to parse_fn for context)
        parse_fn: Callback(def_path, frontmatter, body) -> typed object

    Returns:
        The typed object returned by parse_fn

    Raises:
        Whatever parse_fn raises, plus frontmatter parsing errors
    """
    frontmatter, body = parse_frontmatter(content)
    return parse_fn(def_path, frontmatter, body)


def discover_definition_dirs(path: Path, filename: str) -> list[Path]:
    """
    Find every directory under path that contains a definition file.

    Hidden directories are skipped. The result is sorted by path relative to
    ``path`` so it does not depend on filesystem iteration order.

    Args:
        path: Root directory to scan
        filename: File to look for (e.g., "SKILL.md")

    Returns:
        Sorted list of directories holding ``filename``
    """
    if not path.exists():
        logger.warning(f"Definitions directory not found: {path}")
        return []

    found = []
    for def_file in path.rglob(filename):
        if not def_file.is_file():
            continue
        rel = def_file.parent.relative_to(path)
        if any(part.startswith(".") for part in rel.parts):
            continue
        found.append(def_file.parent)

    return sorted(found, key=lambda d: d.relative_to(path).as_posix())


def write_definition(
    def_dir: Path,
    frontmatter: dict[str, Any],
    body: str,
    filename: str,
) -> Path:
    """
    Write a definition file with YAML frontmatter and markdown body.

    Args:
        def_dir: Definition directory, created if missing
        frontmatter: Dict of YAML frontmatter fields
        body: Markdown body content
        filename: File to write (e.g., "SKILL.md")

    Returns:
        Path to the written file
    """
    def_dir.mkdir(parents=True, exist_ok=True)

    yaml_content = yaml.dump(frontmatter, default_flow_style=False, sort_keys=False)
    content = f"---\n{yaml_content}---\n\n{body.strip()}\n"

    def_file = def_dir / filename
    def_file.write_text(content)

    return def_file
