"""Skill definition models."""

import math
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from skillscout.core.exceptions import BudgetExceededError
from skillscout.utils.config import SizeUnit

MAX_SKILL_ID_LENGTH = 64
MAX_DESCRIPTION_LENGTH = 1024
CHARS_PER_TOKEN = 4


def estimate_size(text: str, unit: SizeUnit = "lines") -> int:
    """Approximate cost of materializing ``text``, never less than 1."""
    if unit == "tokens":
        return max(1, math.ceil(len(text) / CHARS_PER_TOKEN))
    return max(1, len(text.splitlines()))


def reference_key(skill_id: str, path: str) -> str:
    """Session-wide key of a reference document."""
    return f"{skill_id}:{path}"


class ReferenceDoc(BaseModel):
    """Addressable sub-document owned by exactly one skill."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    skill_id: str
    path: str
    body: str
    size_estimate: int

    @property
    def key(self) -> str:
        return reference_key(self.skill_id, self.path)

    @property
    def stem(self) -> str:
        """File name without directories or extension."""
        name = self.path.rsplit("/", 1)[-1]
        return name.rsplit(".", 1)[0]


class Skill(BaseModel):
    """Loaded skill: validated header fields, overview and owned references."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    description: str
    overview_body: str
    overview_size: int
    path: str
    category: str | None = None
    keywords: frozenset[str] = frozenset()
    references: tuple[ReferenceDoc, ...] = ()

    def get_reference(self, path: str) -> ReferenceDoc | None:
        for ref in self.references:
            if ref.path == path:
                return ref
        return None


class SkillSummary(BaseModel):
    """Lightweight skill info for listings."""

    id: str
    description: str
    category: str | None
    keywords: list[str]
    references: list[str]
    overview_size: int

    @classmethod
    def from_skill(cls, skill: Skill) -> "SkillSummary":
        return cls(
            id=skill.id,
            description=skill.description,
            category=skill.category,
            keywords=sorted(skill.keywords),
            references=[ref.path for ref in skill.references],
            overview_size=skill.overview_size,
        )


class CorpusIssue(BaseModel):
    """One structural problem found while loading or validating a corpus."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["malformed", "duplicate"]
    path: str
    message: str
    skill_id: str | None = None

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


class Query(BaseModel):
    """Ephemeral matching request."""

    text: str = ""
    skill_hints: list[str] = Field(default_factory=list)
    reference_hints: list[str] = Field(default_factory=list)


class MatchResult(BaseModel):
    """Ranked candidate skill for a query."""

    model_config = ConfigDict(frozen=True)

    skill_id: str
    score: float = Field(ge=0.0, le=1.0)
    matched_keywords: tuple[str, ...] = ()
    hinted: bool = False


class ResolvedBlock(BaseModel):
    """One materialized item, or a cache-hit marker for an already loaded one."""

    skill_id: str
    kind: Literal["overview", "reference"]
    reference_path: str | None = None
    content: str | None = None
    cost: int = 0
    cache_hit: bool = False

    @property
    def key(self) -> str:
        if self.reference_path is None:
            return self.skill_id
        return reference_key(self.skill_id, self.reference_path)


class ResolvedContent(BaseModel):
    """Outcome of one resolve call."""

    blocks: list[ResolvedBlock] = Field(default_factory=list)
    budget: int
    consumed_budget: int
    budget_exceeded: bool = False
    pending: str | None = None
    pending_cost: int | None = None
    resolved_at: datetime = Field(default_factory=datetime.now)

    @property
    def loaded(self) -> list[ResolvedBlock]:
        """Blocks that carry content (cache hits excluded)."""
        return [block for block in self.blocks if not block.cache_hit]

    def raise_for_budget(self) -> None:
        """Raise BudgetExceededError if resolution stopped early."""
        if self.budget_exceeded:
            raise BudgetExceededError(
                self.pending or "",
                self.pending_cost or 0,
                self.consumed_budget,
                self.budget,
            )
