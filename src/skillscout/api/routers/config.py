"""Config resource router."""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError

from skillscout.api.deps import get_context
from skillscout.api.schemas import RetrievalUpdate
from skillscout.core.context import SharedContext
from skillscout.core.exceptions import DuplicateSkillError
from skillscout.utils.config import RetrievalConfig

router = APIRouter()


@router.get("", response_model=RetrievalConfig)
def get_config(ctx: SharedContext = Depends(get_context)) -> RetrievalConfig:
    """Get current retrieval settings."""
    return ctx.config.retrieval


@router.patch("", response_model=RetrievalConfig)
def update_config(
    data: RetrievalUpdate, ctx: SharedContext = Depends(get_context)
) -> RetrievalConfig:
    """
    Persist retrieval settings to config.user.yaml and apply them.

    Applying reloads the corpus, so every session is invalidated.
    """
    try:
        for name, value in data.model_dump(exclude_unset=True).items():
            ctx.config.set_user(f"retrieval.{name}", value)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    try:
        ctx.reload()
    except DuplicateSkillError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return ctx.config.retrieval
