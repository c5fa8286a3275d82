"""Tests for custom exceptions."""

from pathlib import Path

from skillscout.core.exceptions import (
    BudgetExceededError,
    DuplicateSkillError,
    MalformedSkillError,
    SkillNotFoundError,
    SkillscoutError,
    StaleSessionError,
)


def test_all_errors_share_base_class():
    """All errors derive from SkillscoutError."""
    for cls in (
        BudgetExceededError,
        DuplicateSkillError,
        MalformedSkillError,
        SkillNotFoundError,
        StaleSessionError,
    ):
        assert issubclass(cls, SkillscoutError)


def test_malformed_skill_error_message():
    """MalformedSkillError keeps path, reason and id."""
    err = MalformedSkillError("patterns/state", "missing frontmatter", "state")

    assert str(err) == "Malformed skill at patterns/state: missing frontmatter"
    assert err.path == Path("patterns/state")
    assert err.skill_id == "state"


def test_duplicate_skill_error_sorts_paths():
    """DuplicateSkillError lists paths sorted."""
    err = DuplicateSkillError("state", [Path("z"), Path("a")])

    assert err.paths == [Path("a"), Path("z")]
    assert str(err) == "Duplicate skill id 'state' in: a, z"


def test_budget_exceeded_error_fields():
    """BudgetExceededError keeps the pending item."""
    err = BudgetExceededError("strategy", 4, 2, 5)

    assert err.pending == "strategy"
    assert "would exceed budget (2/5 consumed)" in str(err)
