"""Progressive disclosure: materialize skill content under a budget."""

import logging
import re
import time
from collections.abc import Sequence

from skillscout.core.exceptions import ResolutionTimeoutError, StaleSessionError
from skillscout.core.index import MetadataIndex
from skillscout.core.session import Session
from skillscout.core.skill_def import (
    MatchResult,
    Query,
    ReferenceDoc,
    ResolvedBlock,
    ResolvedContent,
    Skill,
)

logger = logging.getLogger(__name__)


def split_request(request: str) -> tuple[str | None, str]:
    """Split ``skill-id:path`` into its parts. Bare paths have no skill id."""
    skill_id, sep, path = request.partition(":")
    if not sep:
        return None, request
    return skill_id, path


def requested_references(query: Query, skills: Sequence[Skill]) -> list[str]:
    """
    Reference keys a query explicitly asks for.

    Sources are ``query.reference_hints`` (``skill-id:path``, ``path`` or file
    stem) and reference paths or file names quoted in the query text. Only
    references of ``skills`` are considered, first skill wins for bare names.
    """
    keys: list[str] = []

    def add(key: str) -> None:
        if key not in keys:
            keys.append(key)

    for hint in query.reference_hints:
        ref = find_reference(hint, skills)
        if ref is None:
            logger.info(f"No active skill has a reference matching '{hint}'")
            continue
        add(ref.key)

    text = query.text
    for skill in skills:
        for ref in skill.references:
            file_name = ref.path.rsplit("/", 1)[-1]
            if _names(text, ref.path) or _names(text, file_name):
                add(ref.key)

    return keys


def _names(text: str, name: str) -> bool:
    """True if ``name`` appears in ``text`` as a whole path, not inside a longer one."""
    return re.search(rf"(?<![\w./-]){re.escape(name)}(?![\w-])", text) is not None


def find_reference(request: str, skills: Sequence[Skill]) -> ReferenceDoc | None:
    """Find the reference a request names among ``skills``."""
    skill_id, target = split_request(request.strip())
    for skill in skills:
        if skill_id is not None and skill.id != skill_id:
            continue
        for ref in skill.references:
            if target in (ref.path, ref.stem):
                return ref
    return None


class DisclosureResolver:
    """Resolves activated skills into content blocks for one corpus generation.

    Per skill the states are Unresolved -> OverviewLoaded -> ReferenceLoaded.
    References are materialized only when explicitly requested. Anything the
    session already holds comes back as a cache-hit marker with zero cost.
    """

    def __init__(self, index: MetadataIndex, generation: int = 0):
        self.index = index
        self.generation = generation

    def resolve(
        self,
        matches: Sequence[MatchResult],
        session: Session,
        budget: int,
        requests: Sequence[str] = (),
        max_skills: int | None = None,
        timeout: float | None = None,
    ) -> ResolvedContent:
        """
        Resolve matches in score order until done or the budget is exhausted.

        Args:
            matches: Ranked matches, best first
            session: Session cache to read and update
            budget: Upper bound for the session's consumed budget
            requests: Explicitly requested references
                (``skill-id:path``, ``path`` or file stem)
            max_skills: Resolve at most this many matches
            timeout: Abandon resolution after this many seconds

        Returns:
            ResolvedContent; ``budget_exceeded`` is set when an item did not fit.
            The item that did not fit is never included, nor truncated.

        Raises:
            StaleSessionError: If the session predates the current corpus
            ResolutionTimeoutError: If timeout elapses; the session is unchanged
        """
        if budget <= 0:
            raise ValueError(f"budget must be positive, got {budget}")
        if session.generation != self.generation:
            raise StaleSessionError(
                session.session_id, session.generation, self.generation
            )

        deadline = None if timeout is None else time.monotonic() + timeout
        active = self._active_skills(matches, max_skills)
        wanted = self._group_requests(requests, active)

        with session.lock:
            consumed = session.consumed_budget
            staged_skills: dict[str, int] = {}
            staged_refs: dict[str, int] = {}
            blocks: list[ResolvedBlock] = []
            pending: tuple[str, int] | None = None

            for skill in active:
                self._check_deadline(deadline, timeout)

                if session.has_skill(skill.id) or skill.id in staged_skills:
                    blocks.append(
                        ResolvedBlock(skill_id=skill.id, kind="overview", cache_hit=True)
                    )
                elif consumed + skill.overview_size > budget:
                    pending = (skill.id, skill.overview_size)
                    break
                else:
                    consumed += skill.overview_size
                    staged_skills[skill.id] = skill.overview_size
                    blocks.append(
                        ResolvedBlock(
                            skill_id=skill.id,
                            kind="overview",
                            content=skill.overview_body,
                            cost=skill.overview_size,
                        )
                    )

                for ref in wanted.get(skill.id, []):
                    self._check_deadline(deadline, timeout)

                    if session.has_reference(ref.key) or ref.key in staged_refs:
                        blocks.append(
                            ResolvedBlock(
                                skill_id=skill.id,
                                kind="reference",
                                reference_path=ref.path,
                                cache_hit=True,
                            )
                        )
                    elif consumed + ref.size_estimate > budget:
                        pending = (ref.key, ref.size_estimate)
                        break
                    else:
                        consumed += ref.size_estimate
                        staged_refs[ref.key] = ref.size_estimate
                        blocks.append(
                            ResolvedBlock(
                                skill_id=skill.id,
                                kind="reference",
                                reference_path=ref.path,
                                content=ref.body,
                                cost=ref.size_estimate,
                            )
                        )
                if pending is not None:
                    break

            # Commit only once the whole call has succeeded
            for skill_id, cost in staged_skills.items():
                session.record_skill(skill_id, cost)
            for key, cost in staged_refs.items():
                session.record_reference(key, cost)
            consumed_budget = session.consumed_budget

        if pending is not None:
            logger.info(
                f"Budget exhausted in session {session.session_id}: "
                f"'{pending[0]}' needs {pending[1]}, {consumed_budget}/{budget} used"
            )

        return ResolvedContent(
            blocks=blocks,
            budget=budget,
            consumed_budget=consumed_budget,
            budget_exceeded=pending is not None,
            pending=pending[0] if pending else None,
            pending_cost=pending[1] if pending else None,
        )

    def _active_skills(
        self, matches: Sequence[MatchResult], max_skills: int | None
    ) -> list[Skill]:
        skills: list[Skill] = []
        for match in matches:
            if any(s.id == match.skill_id for s in skills):
                continue
            skills.append(self.index.get(match.skill_id))
            if max_skills is not None and len(skills) >= max_skills:
                break
        return skills

    @staticmethod
    def _group_requests(
        requests: Sequence[str], skills: Sequence[Skill]
    ) -> dict[str, list[ReferenceDoc]]:
        grouped: dict[str, list[ReferenceDoc]] = {}
        for request in requests:
            ref = find_reference(request, skills)
            if ref is None:
                logger.info(f"Skipping unknown reference request '{request}'")
                continue
            refs = grouped.setdefault(ref.skill_id, [])
            if ref not in refs:
                refs.append(ref)
        return grouped

    @staticmethod
    def _check_deadline(deadline: float | None, timeout: float | None) -> None:
        if deadline is not None and time.monotonic() >= deadline:
            raise ResolutionTimeoutError(timeout or 0.0)

