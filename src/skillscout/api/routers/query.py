"""Stateless query router."""

from fastapi import APIRouter, Depends

from skillscout.api.deps import get_context
from skillscout.core.context import SharedContext
from skillscout.core.skill_def import MatchResult, Query

router = APIRouter()


@router.post("", response_model=list[MatchResult])
def run_query(query: Query, ctx: SharedContext = Depends(get_context)) -> list[MatchResult]:
    """Rank skills for a query. An empty list means nothing matched."""
    return ctx.match(query)
