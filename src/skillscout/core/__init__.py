"""Core retrieval engine."""

from .context import SharedContext
from .corpus import Corpus
from .exceptions import (
    BudgetExceededError,
    DuplicateSkillError,
    MalformedSkillError,
    ResolutionTimeoutError,
    SessionNotFoundError,
    SkillNotFoundError,
    SkillscoutError,
    StaleSessionError,
)
from .index import MetadataIndex, build_index, tokenize
from .resolver import DisclosureResolver
from .scorer import OverlapScorer, Scorer
from .session import Session, SessionManager
from .skill_def import (
    MatchResult,
    Query,
    ReferenceDoc,
    ResolvedBlock,
    ResolvedContent,
    Skill,
)
from .skill_loader import SkillLoader, load_corpus

__all__ = [
    "BudgetExceededError",
    "Corpus",
    "DisclosureResolver",
    "DuplicateSkillError",
    "MalformedSkillError",
    "MatchResult",
    "MetadataIndex",
    "OverlapScorer",
    "Query",
    "ReferenceDoc",
    "ResolutionTimeoutError",
    "ResolvedBlock",
    "ResolvedContent",
    "Scorer",
    "Session",
    "SessionManager",
    "SessionNotFoundError",
    "SharedContext",
    "Skill",
    "SkillLoader",
    "SkillNotFoundError",
    "SkillscoutError",
    "StaleSessionError",
    "build_index",
    "load_corpus",
    "tokenize",
]
