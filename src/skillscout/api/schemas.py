"""Pydantic schemas for API request/response models."""

from datetime import datetime

from pydantic import BaseModel, Field

from skillscout.core.session import Session
from skillscout.core.skill_def import (
    CorpusIssue,
    MatchResult,
    ResolvedContent,
    Skill,
    SkillSummary,
)
from skillscout.utils.config import SizeUnit


class SkillDetail(SkillSummary):
    """Skill summary plus its overview body."""

    path: str
    overview_body: str

    @classmethod
    def from_skill(cls, skill: Skill) -> "SkillDetail":
        summary = SkillSummary.from_skill(skill)
        return cls(
            **summary.model_dump(),
            path=skill.path,
            overview_body=skill.overview_body,
        )


class CorpusStatus(BaseModel):
    """Current corpus generation and what was rejected while loading it."""

    root: str
    generation: int
    skill_count: int
    categories: list[str]
    errors: list[CorpusIssue]


class ResolveRequest(BaseModel):
    """Request body for resolving a query inside a session."""

    text: str = ""
    skill_hints: list[str] = Field(default_factory=list)
    reference_hints: list[str] = Field(default_factory=list)
    budget: int | None = Field(default=None, gt=0)


class ResolveResponse(BaseModel):
    matches: list[MatchResult]
    content: ResolvedContent


class SessionInfo(BaseModel):
    """Public view of a session cache."""

    session_id: str
    generation: int
    created_at: datetime
    consumed_budget: int
    loaded_skill_ids: list[str]
    loaded_reference_paths: list[str]

    @classmethod
    def from_session(cls, session: Session) -> "SessionInfo":
        with session.lock:
            return cls(
                session_id=session.session_id,
                generation=session.generation,
                created_at=session.created_at,
                consumed_budget=session.consumed_budget,
                loaded_skill_ids=sorted(session.loaded_skill_ids),
                loaded_reference_paths=sorted(session.loaded_reference_paths),
            )


class RetrievalUpdate(BaseModel):
    """Request body for updating retrieval settings (partial updates)."""

    size_unit: SizeUnit | None = None
    default_budget: int | None = Field(default=None, gt=0)
    min_score: float | None = Field(default=None, ge=0.0, lt=1.0)
    max_results: int | None = Field(default=None, gt=0)
    max_active_skills: int | None = Field(default=None, gt=0)
    max_overview_lines: int | None = Field(default=None, gt=0)
    load_workers: int | None = Field(default=None, gt=0)
