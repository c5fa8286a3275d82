"""Relevance scoring: ranks candidate skills for a query."""

import logging
import re
from abc import ABC, abstractmethod

from skillscout.core.corpus import Corpus
from skillscout.core.index import MetadataIndex, tokenize
from skillscout.core.skill_def import MatchResult, Query

logger = logging.getLogger(__name__)

# "/skill-id" in free text is an explicit request for that skill
SLASH_MENTION_RE = re.compile(r"(?<![\w/])/([a-z0-9]+(?:-[a-z0-9]+)*)(?![\w-])")


class Scorer(ABC):
    """Abstract base class for relevance scorers."""

    @abstractmethod
    def score(
        self, query: Query, corpus: Corpus, index: MetadataIndex
    ) -> list[MatchResult]:
        """Return matches ordered best first. An empty list means no match."""


def explicit_hints(query: Query, index: MetadataIndex) -> list[str]:
    """
    Collect skill ids the query names directly.

    Sources are ``query.skill_hints`` followed by ``/skill-id`` mentions in the
    text. Unknown ids are logged and dropped.
    """
    requested = list(query.skill_hints)
    requested.extend(SLASH_MENTION_RE.findall(query.text.lower()))

    hints: list[str] = []
    for hint in requested:
        hint = hint.strip().lower()
        if hint in hints:
            continue
        if hint not in index:
            if hint in query.skill_hints:
                logger.warning(f"Ignoring hint for unknown skill '{hint}'")
            continue
        hints.append(hint)
    return hints


class OverlapScorer(Scorer):
    """Keyword-coverage scorer.

    score = |query tokens & skill keywords| / |skill keywords|, so a skill whose
    whole keyword set is covered outranks one that shares a single token among
    many. Explicitly hinted skills score 1.0 and always come first.
    """

    def __init__(self, min_score: float = 0.0, limit: int | None = None):
        if not 0.0 <= min_score < 1.0:
            raise ValueError(f"min_score must be in [0, 1), got {min_score}")
        self.min_score = min_score
        self.limit = limit

    def score(
        self, query: Query, corpus: Corpus, index: MetadataIndex
    ) -> list[MatchResult]:
        tokens = set(tokenize(query.text))
        hints = set(explicit_hints(query, index))
        candidates = index.candidates(tokens) | hints

        results: list[MatchResult] = []
        for skill_id in candidates:
            skill = index.get(skill_id)
            matched = tuple(sorted(tokens & skill.keywords))

            if skill_id in hints:
                results.append(
                    MatchResult(
                        skill_id=skill_id,
                        score=1.0,
                        matched_keywords=matched,
                        hinted=True,
                    )
                )
                continue

            if not skill.keywords:
                continue
            value = len(matched) / len(skill.keywords)
            if value <= self.min_score:
                continue
            results.append(
                MatchResult(skill_id=skill_id, score=value, matched_keywords=matched)
            )

        results.sort(key=lambda r: (not r.hinted, -r.score, r.skill_id))
        if self.limit is not None:
            results = results[: self.limit]

        logger.debug(
            f"Scored {len(candidates)} candidates for {len(tokens)} tokens "
            f"against {len(corpus)} skills: {[r.skill_id for r in results]}"
        )
        return results
