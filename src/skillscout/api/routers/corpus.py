"""Corpus status and reload router."""

from fastapi import APIRouter, Depends, HTTPException

from skillscout.api.deps import get_context
from skillscout.api.schemas import CorpusStatus
from skillscout.core.context import SharedContext
from skillscout.core.exceptions import DuplicateSkillError

router = APIRouter()


def _status(ctx: SharedContext) -> CorpusStatus:
    return CorpusStatus(
        root=str(ctx.corpus.root),
        generation=ctx.generation,
        skill_count=len(ctx.corpus),
        categories=ctx.index.categories(),
        errors=list(ctx.corpus.errors),
    )


@router.get("", response_model=CorpusStatus)
def get_corpus(ctx: SharedContext = Depends(get_context)) -> CorpusStatus:
    """Current corpus generation and rejected skills."""
    return _status(ctx)


@router.post("/reload", response_model=CorpusStatus)
def reload_corpus(ctx: SharedContext = Depends(get_context)) -> CorpusStatus:
    """Re-read the corpus from disk. Every session is invalidated."""
    try:
        ctx.reload()
    except DuplicateSkillError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _status(ctx)
