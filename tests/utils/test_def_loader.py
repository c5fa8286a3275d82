"""Tests for definition loader utilities."""

from pathlib import Path

import pytest
import yaml

from skillscout.utils.def_loader import (
    InvalidFrontmatterError,
    discover_definition_dirs,
    has_frontmatter,
    parse_definition,
    parse_frontmatter,
    split_frontmatter,
    write_definition,
)


class TestParseFrontmatter:
    def test_parse_basic_frontmatter(self):
        """Parse simple YAML frontmatter and body."""
        frontmatter, body = parse_frontmatter("---\nname: test\n---\nBody content here.")

        assert frontmatter == {"name": "test"}
        assert body == "Body content here."

    def test_parse_with_multiple_fields(self):
        """Parse frontmatter with multiple YAML fields."""
        content = "---\nname: test\nversion: 1.0\nenabled: true\n---\nBody"
        frontmatter, body = parse_frontmatter(content)

        assert frontmatter == {"name": "test", "version": 1.0, "enabled": True}
        assert body == "Body"

    def test_parse_preserves_delimiter_in_body(self):
        """Preserve --- delimiters that appear in body."""
        content = "---\nname: test\n---\nHere is --- a separator\n---\nmore content"
        frontmatter, body = parse_frontmatter(content)

        assert frontmatter == {"name": "test"}
        assert body == "Here is --- a separator\n---\nmore content"

    def test_parse_empty_frontmatter(self):
        """Handle empty frontmatter with proper delimiters."""
        frontmatter, body = parse_frontmatter("---\n\n---\nBody content")

        assert frontmatter == {}
        assert body == "Body content"

    def test_parse_no_frontmatter_returns_empty_dict(self):
        """Return empty dict and full content when no frontmatter."""
        content = "Just body content\nno frontmatter"
        frontmatter, body = parse_frontmatter(content)

        assert frontmatter == {}
        assert body == content

    def test_parse_windows_line_endings(self):
        """CRLF line endings are handled."""
        frontmatter, body = parse_frontmatter("---\r\nname: test\r\n---\r\nBody")

        assert frontmatter == {"name": "test"}
        assert body == "Body"

    def test_unclosed_frontmatter_is_body(self):
        """An unclosed header is treated as body."""
        content = "---\nname: test\nno closing delimiter"
        frontmatter, body = parse_frontmatter(content)

        assert frontmatter == {}
        assert body == content

    def test_non_mapping_frontmatter_raises(self):
        """A header that is not a mapping raises."""
        with pytest.raises(InvalidFrontmatterError):
            parse_frontmatter("---\n- just\n- a list\n---\nBody")

    def test_invalid_yaml_raises(self):
        """Invalid YAML raises."""
        with pytest.raises(yaml.YAMLError):
            parse_frontmatter("---\nname: [unclosed\n---\nBody")


class TestSplitFrontmatter:
    def test_frontmatter_at_end_of_file(self):
        """A header closed at end of file has an empty body."""
        assert split_frontmatter("---\nname: test\n---") == ("name: test", "")

    def test_has_frontmatter(self):
        """has_frontmatter detects a leading header."""
        assert has_frontmatter("---\nname: test\n---\nBody")
        assert not has_frontmatter("# Heading\n\nBody")


class TestParseDefinition:
    def test_passes_path_frontmatter_and_body(self, tmp_path: Path):
        """parse_definition hands path, header and body to the callback."""
        result = parse_definition(
            "---\nname: test\n---\nBody",
            tmp_path,
            lambda path, fm, body: (path, fm, body),
        )

        assert result == (tmp_path, {"name": "test"}, "Body")


class TestDiscoverDefinitionDirs:
    def test_missing_directory_returns_empty(self, tmp_path: Path):
        """Discovery in a missing directory returns nothing."""
        assert discover_definition_dirs(tmp_path / "missing", "SKILL.md") == []

    def test_finds_nested_dirs_in_sorted_order(self, tmp_path: Path):
        """Nested definition directories are found in sorted order."""
        for rel in ["zeta", "alpha/beta", "alpha", "mid/inner/deep"]:
            (tmp_path / rel).mkdir(parents=True, exist_ok=True)
            (tmp_path / rel / "SKILL.md").write_text("x")
        (tmp_path / "no-skill").mkdir()

        result = discover_definition_dirs(tmp_path, "SKILL.md")

        assert [d.relative_to(tmp_path).as_posix() for d in result] == [
            "alpha",
            "alpha/beta",
            "mid/inner/deep",
            "zeta",
        ]

    def test_skips_hidden_directories(self, tmp_path: Path):
        """Hidden directories are skipped."""
        (tmp_path / ".git" / "hooks").mkdir(parents=True)
        (tmp_path / ".git" / "hooks" / "SKILL.md").write_text("x")
        (tmp_path / "visible").mkdir()
        (tmp_path / "visible" / "SKILL.md").write_text("x")

        result = discover_definition_dirs(tmp_path, "SKILL.md")

        assert result == [tmp_path / "visible"]


class TestWriteDefinition:
    def test_written_file_parses_back(self, tmp_path: Path):
        """write_definition output parses back to the same data."""
        def_file = write_definition(
            tmp_path / "my-skill",
            {"name": "my-skill", "description": "Does things"},
            "\n# Title\n\nText\n\n",
            "SKILL.md",
        )

        frontmatter, body = parse_frontmatter(def_file.read_text())

        assert def_file == tmp_path / "my-skill" / "SKILL.md"
        assert frontmatter == {"name": "my-skill", "description": "Does things"}
        assert body.strip() == "# Title\n\nText"
