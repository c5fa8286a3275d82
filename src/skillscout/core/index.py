"""Metadata index over a corpus snapshot."""

import logging
import re
from collections import defaultdict
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from skillscout.core.corpus import Corpus
from skillscout.core.exceptions import SkillNotFoundError
from skillscout.core.skill_def import Skill

logger = logging.getLogger(__name__)

MIN_TOKEN_LENGTH = 2
_SPLIT_RE = re.compile(r"[^a-z0-9]+")


def tokenize(text: str) -> list[str]:
    """
    Split text into index tokens.

    Lowercases, splits on non-alphanumeric runs and drops tokens shorter than
    two characters. No stemming. Tokens keep first-seen order, deduplicated.
    """
    seen: dict[str, None] = {}
    for token in _SPLIT_RE.split(text.lower()):
        if len(token) >= MIN_TOKEN_LENGTH:
            seen.setdefault(token, None)
    return list(seen)


class MetadataIndex:
    """Immutable lookup structures built from one Corpus.

    A corpus change means building a new index; there is no patching.
    """

    def __init__(
        self,
        skills: Mapping[str, Skill],
        keywords: Mapping[str, frozenset[str]],
        categories: Mapping[str, frozenset[str]],
    ):
        self._skills = MappingProxyType(dict(skills))
        self._keywords = MappingProxyType(dict(keywords))
        self._categories = MappingProxyType(dict(categories))

    @classmethod
    def build(cls, corpus: Corpus) -> "MetadataIndex":
        skills: dict[str, Skill] = {}
        keywords: dict[str, set[str]] = defaultdict(set)
        categories: dict[str, set[str]] = defaultdict(set)

        for skill in corpus.skills:
            skills[skill.id] = skill
            for keyword in skill.keywords:
                keywords[keyword].add(skill.id)
            if skill.category is not None:
                categories[skill.category].add(skill.id)

        logger.debug(
            f"Indexed {len(skills)} skills, {len(keywords)} keywords, "
            f"{len(categories)} categories"
        )
        return cls(
            skills,
            {k: frozenset(v) for k, v in keywords.items()},
            {k: frozenset(v) for k, v in categories.items()},
        )

    def candidates(self, tokens: Iterable[str]) -> set[str]:
        """Union of skill ids matching any token. Ranking is the scorer's job."""
        result: set[str] = set()
        for token in tokens:
            result.update(self._keywords.get(token, ()))
        return result

    def get(self, skill_id: str) -> Skill:
        try:
            return self._skills[skill_id]
        except KeyError:
            raise SkillNotFoundError(skill_id) from None

    def by_keyword(self, keyword: str) -> frozenset[str]:
        return self._keywords.get(keyword, frozenset())

    def by_category(self, category: str) -> frozenset[str]:
        return self._categories.get(category, frozenset())

    def categories(self) -> list[str]:
        return sorted(self._categories)

    def skill_ids(self) -> list[str]:
        return sorted(self._skills)

    def __contains__(self, skill_id: object) -> bool:
        return skill_id in self._skills

    def __len__(self) -> int:
        return len(self._skills)


def build_index(corpus: Corpus) -> MetadataIndex:
    """Build a MetadataIndex over every skill in the corpus."""
    return MetadataIndex.build(corpus)
