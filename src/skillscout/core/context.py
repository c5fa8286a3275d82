"""Shared application state: corpus snapshot, index, scorer, resolver, sessions."""

import logging
import threading

from skillscout.core.corpus import Corpus
from skillscout.core.index import MetadataIndex, build_index
from skillscout.core.resolver import (
    DisclosureResolver,
    requested_references,
    split_request,
)
from skillscout.core.scorer import OverlapScorer, Scorer
from skillscout.core.session import Session, SessionManager
from skillscout.core.skill_def import MatchResult, Query, ResolvedContent
from skillscout.core.skill_loader import SkillLoader
from skillscout.utils.config import Config

logger = logging.getLogger(__name__)


class SharedContext:
    """Global shared state for the application.

    Holds one corpus generation at a time. ``reload`` swaps in a fresh corpus
    and index and invalidates every session.
    """

    config: Config
    skill_loader: SkillLoader
    scorer: Scorer
    sessions: SessionManager
    corpus: Corpus
    index: MetadataIndex
    resolver: DisclosureResolver
    generation: int

    def __init__(self, config: Config, scorer: Scorer | None = None):
        self.config = config
        self.skill_loader = SkillLoader.from_config(config)
        self._custom_scorer = scorer
        self.scorer = scorer or self._default_scorer()
        self.sessions = SessionManager()
        self.generation = 0
        self._reload_lock = threading.Lock()
        self._install(self.skill_loader.load())

    def _default_scorer(self) -> Scorer:
        return OverlapScorer(
            min_score=self.config.retrieval.min_score,
            limit=self.config.retrieval.max_results,
        )

    def _install(self, corpus: Corpus) -> None:
        self.corpus = corpus
        self.index = build_index(corpus)
        self.resolver = DisclosureResolver(self.index, generation=self.generation)

    def reload(self) -> Corpus:
        """
        Re-read the configuration and the corpus from disk. Stop-the-world.

        An invalid config file is logged and the current settings are kept.

        Raises:
            DuplicateSkillError: If the new corpus has an id collision; the
                previous corpus, loader and scorer stay active in that case
        """
        with self._reload_lock:
            self.config.reload()
            skill_loader = SkillLoader.from_config(self.config)
            corpus = skill_loader.load()

            self.skill_loader = skill_loader
            self.scorer = self._custom_scorer or self._default_scorer()
            self.generation += 1
            self._install(corpus)
            dropped = self.sessions.invalidate_all()
        logger.info(
            f"Corpus reloaded (generation {self.generation}, "
            f"{len(corpus)} skills, {dropped} sessions invalidated)"
        )
        return corpus

    def new_session(self) -> Session:
        return self.sessions.new_session(generation=self.generation)

    def match(self, query: Query) -> list[MatchResult]:
        """Rank skills for a query. A ``skill:path`` reference hint hints its skill."""
        extra_hints = []
        for hint in query.reference_hints:
            skill_id, _ = split_request(hint)
            if skill_id and skill_id in self.index and skill_id not in query.skill_hints:
                extra_hints.append(skill_id)
        if extra_hints:
            query = query.model_copy(
                update={"skill_hints": [*query.skill_hints, *extra_hints]}
            )
        return self.scorer.score(query, self.corpus, self.index)

    def resolve(
        self,
        session: Session,
        query: Query,
        budget: int | None = None,
        timeout: float | None = None,
    ) -> tuple[list[MatchResult], ResolvedContent]:
        """
        Match a query and resolve the matches into the session.

        References requested by a follow-up query may belong to skills the
        session already holds even when the query itself no longer matches
        them; those skills are appended after the ranked matches.
        """
        matches = self.match(query)
        retrieval = self.config.retrieval
        active = matches
        if retrieval.max_active_skills is not None:
            active = matches[: retrieval.max_active_skills]

        # Held across the follow-up snapshot and the commit inside the resolver
        with session.lock:
            known_ids = {m.skill_id for m in active}
            follow_up = [
                self.index.get(skill_id)
                for skill_id in sorted(session.loaded_skill_ids)
                if skill_id not in known_ids and skill_id in self.index
            ]
            skills = [self.index.get(m.skill_id) for m in active] + follow_up
            requests = requested_references(query, skills)

            requested_skills = {split_request(key)[0] for key in requests}
            resolvable = list(active) + [
                MatchResult(skill_id=skill.id, score=0.0)
                for skill in follow_up
                if skill.id in requested_skills
            ]

            content = self.resolver.resolve(
                resolvable,
                session,
                budget or retrieval.default_budget,
                requests=requests,
                timeout=timeout,
            )
        return matches, content
