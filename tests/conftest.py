"""Shared test fixtures for skillscout test suite."""

from pathlib import Path

import pytest

from skillscout.core.context import SharedContext
from skillscout.core.corpus import Corpus
from skillscout.core.index import MetadataIndex, build_index
from skillscout.core.skill_loader import SkillLoader
from skillscout.utils.config import Config
from skillscout.utils.def_loader import write_definition

STRATEGY_BODY = """# Strategy

Define a family of algorithms and make them interchangeable.
See references/examples.md for code."""

STATE_BODY = """# State

Change behavior when internal state changes."""

EXAMPLES_REF = "# Examples\n\nSorting with comparators.\n"
PITFALLS_REF = "# Pitfalls\nToo many tiny strategies.\n"


def write_skill(
    root: Path,
    rel: str,
    frontmatter: dict | None,
    body: str = "# Skill\n\nBody.",
    references: dict[str, str] | None = None,
) -> Path:
    """Create a skill directory with SKILL.md and optional reference files."""
    skill_dir = root / rel
    if frontmatter is None:
        skill_dir.mkdir(parents=True, exist_ok=True)
        (skill_dir / "SKILL.md").write_text(body)
    else:
        write_definition(skill_dir, frontmatter, body, "SKILL.md")

    for path, text in (references or {}).items():
        ref_file = skill_dir / path
        ref_file.parent.mkdir(parents=True, exist_ok=True)
        ref_file.write_text(text)
    return skill_dir


@pytest.fixture
def skills_dir(tmp_path: Path) -> Path:
    """Empty corpus root."""
    path = tmp_path / "skills"
    path.mkdir()
    return path


@pytest.fixture
def pattern_skills(skills_dir: Path) -> Path:
    """Corpus with a strategy and a state skill under one category."""
    write_skill(
        skills_dir,
        "behavioral/strategy",
        {"name": "strategy", "description": "Interchangeable algorithm"},
        STRATEGY_BODY,
        {
            "references/examples.md": EXAMPLES_REF,
            "references/pitfalls.md": PITFALLS_REF,
        },
    )
    write_skill(
        skills_dir,
        "behavioral/state",
        {"name": "state", "description": "Transition behavior"},
        STATE_BODY,
    )
    return skills_dir


@pytest.fixture
def pattern_corpus(pattern_skills: Path) -> Corpus:
    return SkillLoader(pattern_skills).load()


@pytest.fixture
def pattern_index(pattern_corpus: Corpus) -> MetadataIndex:
    return build_index(pattern_corpus)


@pytest.fixture
def test_config(tmp_path: Path, pattern_skills: Path) -> Config:
    """Config with workspace pointing to tmp_path and the pattern corpus."""
    return Config(workspace=tmp_path, skills_path=Path("skills"))


@pytest.fixture
def test_context(test_config: Config) -> SharedContext:
    """SharedContext over the pattern corpus."""
    return SharedContext(config=test_config)
