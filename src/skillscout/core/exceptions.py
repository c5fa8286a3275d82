"""Custom exceptions for skillscout."""

from pathlib import Path


class SkillscoutError(Exception):
    """Base class for all skillscout errors."""


class MalformedSkillError(SkillscoutError):
    """A skill directory failed structural validation.

    Local to one skill: the loader excludes the skill and keeps going.
    """

    def __init__(self, path: Path | str, reason: str, skill_id: str | None = None):
        super().__init__(f"Malformed skill at {path}: {reason}")
        self.path = Path(path)
        self.reason = reason
        self.skill_id = skill_id


class DuplicateSkillError(SkillscoutError):
    """Two skill directories resolve to the same id. Fatal for a corpus load."""

    def __init__(self, skill_id: str, paths: list[Path]):
        self.skill_id = skill_id
        self.paths = sorted(paths)
        joined = ", ".join(str(p) for p in self.paths)
        super().__init__(f"Duplicate skill id '{skill_id}' in: {joined}")


class SkillNotFoundError(SkillscoutError):
    """Raised when a skill id is not part of the corpus."""

    def __init__(self, skill_id: str):
        super().__init__(f"Skill not found: {skill_id}")
        self.skill_id = skill_id


class BudgetExceededError(SkillscoutError):
    """Resolution stopped because the next item would overflow the budget.

    Not fatal. Callers may retry with a narrower scope.
    """

    def __init__(self, pending: str, cost: int, consumed: int, budget: int):
        super().__init__(
            f"Loading '{pending}' (cost {cost}) would exceed budget "
            f"({consumed}/{budget} consumed)"
        )
        self.pending = pending
        self.cost = cost
        self.consumed = consumed
        self.budget = budget


class StaleSessionError(SkillscoutError):
    """Session was created against a corpus that has since been reloaded."""

    def __init__(self, session_id: str, generation: int, current: int):
        super().__init__(
            f"Session '{session_id}' belongs to corpus generation {generation}, "
            f"current is {current}"
        )
        self.session_id = session_id
        self.generation = generation
        self.current = current


class SessionNotFoundError(SkillscoutError):
    """Raised when a session id is unknown to the session manager."""

    def __init__(self, session_id: str):
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id


class ResolutionTimeoutError(SkillscoutError):
    """Resolution was abandoned after the caller-supplied timeout."""

    def __init__(self, timeout: float):
        super().__init__(f"Resolution abandoned after {timeout:.3f}s")
        self.timeout = timeout
