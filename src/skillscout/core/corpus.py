"""Immutable corpus snapshot."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict

from skillscout.core.exceptions import SkillNotFoundError
from skillscout.core.skill_def import CorpusIssue, Skill


class Corpus(BaseModel):
    """All skills loaded from one root, ordered by relative path.

    ``errors`` lists skills that were excluded as malformed.
    """

    model_config = ConfigDict(frozen=True)

    root: Path
    skills: tuple[Skill, ...] = ()
    errors: tuple[CorpusIssue, ...] = ()

    @property
    def skill_ids(self) -> list[str]:
        return [skill.id for skill in self.skills]

    def get(self, skill_id: str) -> Skill:
        for skill in self.skills:
            if skill.id == skill_id:
                return skill
        raise SkillNotFoundError(skill_id)

    def __contains__(self, skill_id: object) -> bool:
        return any(skill.id == skill_id for skill in self.skills)

    def __len__(self) -> int:
        return len(self.skills)
