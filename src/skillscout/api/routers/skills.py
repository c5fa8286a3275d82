"""Skill resource router."""

from fastapi import APIRouter, Depends, HTTPException

from skillscout.api.deps import get_context
from skillscout.api.schemas import SkillDetail
from skillscout.core.context import SharedContext
from skillscout.core.exceptions import SkillNotFoundError
from skillscout.core.resolver import find_reference
from skillscout.core.skill_def import ReferenceDoc, SkillSummary

router = APIRouter()


@router.get("", response_model=list[SkillSummary])
def list_skills(
    category: str | None = None, ctx: SharedContext = Depends(get_context)
) -> list[SkillSummary]:
    """List all skills, optionally within one category."""
    skills = ctx.corpus.skills
    if category is not None:
        ids = ctx.index.by_category(category)
        skills = tuple(s for s in skills if s.id in ids)
    return [SkillSummary.from_skill(skill) for skill in skills]


@router.get("/{skill_id}", response_model=SkillDetail)
def get_skill(skill_id: str, ctx: SharedContext = Depends(get_context)) -> SkillDetail:
    """Get skill by ID, overview included."""
    try:
        return SkillDetail.from_skill(ctx.index.get(skill_id))
    except SkillNotFoundError:
        raise HTTPException(status_code=404, detail=f"Skill not found: {skill_id}")


@router.get("/{skill_id}/references/{path:path}", response_model=ReferenceDoc)
def get_reference(
    skill_id: str, path: str, ctx: SharedContext = Depends(get_context)
) -> ReferenceDoc:
    """Get one reference document of a skill. Does not touch any session."""
    try:
        skill = ctx.index.get(skill_id)
    except SkillNotFoundError:
        raise HTTPException(status_code=404, detail=f"Skill not found: {skill_id}")

    ref = find_reference(path, [skill])
    if ref is None:
        raise HTTPException(
            status_code=404, detail=f"Reference not found in {skill_id}: {path}"
        )
    return ref
