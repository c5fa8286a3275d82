"""Corpus loader: turns a directory tree of skills into an immutable Corpus."""

import logging
import re
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from skillscout.core.corpus import Corpus
from skillscout.core.exceptions import DuplicateSkillError, MalformedSkillError
from skillscout.core.index import tokenize
from skillscout.core.skill_def import (
    MAX_DESCRIPTION_LENGTH,
    MAX_SKILL_ID_LENGTH,
    CorpusIssue,
    ReferenceDoc,
    Skill,
    estimate_size,
)
from skillscout.utils.config import SizeUnit
from skillscout.utils.def_loader import (
    InvalidFrontmatterError,
    discover_definition_dirs,
    has_frontmatter,
    parse_definition,
)

if TYPE_CHECKING:
    from skillscout.utils.config import Config

logger = logging.getLogger(__name__)

SKILL_FILE = "SKILL.md"
REFERENCE_SUFFIX = ".md"
SKILL_ID_RE = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


class SkillLoader:
    """Load and validate skill definitions from a corpus root."""

    @staticmethod
    def from_config(config: "Config") -> "SkillLoader":
        """Create SkillLoader from config."""
        return SkillLoader(
            config.skills_path,
            size_unit=config.retrieval.size_unit,
            max_overview_lines=config.retrieval.max_overview_lines,
            max_workers=config.retrieval.load_workers,
        )

    def __init__(
        self,
        skills_path: Path,
        size_unit: SizeUnit = "lines",
        max_overview_lines: int = 500,
        max_workers: int = 1,
    ):
        self.skills_path = skills_path
        self.size_unit = size_unit
        self.max_overview_lines = max_overview_lines
        self.max_workers = max_workers

    def discover(self) -> list[Path]:
        """Return every skill directory, sorted by path relative to the root."""
        return discover_definition_dirs(self.skills_path, SKILL_FILE)

    def load(self) -> Corpus:
        """
        Load the whole corpus.

        Malformed skills are logged, excluded and recorded in ``Corpus.errors``.

        Returns:
            Immutable Corpus snapshot

        Raises:
            DuplicateSkillError: If two directories resolve to the same id
        """
        skills, issues = self._parse_all()

        duplicates = self._find_duplicates(skills)
        if duplicates:
            skill_id = min(duplicates)
            raise DuplicateSkillError(
                skill_id, [Path(p) for p in duplicates[skill_id]]
            )

        logger.info(
            f"Loaded {len(skills)} skills from {self.skills_path} "
            f"({len(issues)} rejected)"
        )
        return Corpus(root=self.skills_path, skills=tuple(skills), errors=tuple(issues))

    def validate(self) -> list[CorpusIssue]:
        """
        Collect every structural problem without aborting.

        Returns:
            Malformed skills and duplicate ids, ordered by path
        """
        skills, issues = self._parse_all()

        for skill_id, paths in sorted(self._find_duplicates(skills).items()):
            for path in paths:
                issues.append(
                    CorpusIssue(
                        kind="duplicate",
                        path=path,
                        message=f"duplicate skill id '{skill_id}' "
                        f"(also in {', '.join(p for p in paths if p != path)})",
                        skill_id=skill_id,
                    )
                )

        return sorted(issues, key=lambda issue: (issue.path, issue.kind))

    def load_skill(self, skill_dir: Path) -> Skill:
        """
        Parse one skill directory.

        Args:
            skill_dir: Directory containing SKILL.md

        Returns:
            Validated Skill with its references

        Raises:
            MalformedSkillError: If the skill fails validation
        """
        rel_path = self._relative(skill_dir)
        try:
            content = (skill_dir / SKILL_FILE).read_text(encoding="utf-8")
            return parse_definition(content, skill_dir, self._parse_skill)
        except (yaml.YAMLError, InvalidFrontmatterError) as e:
            raise MalformedSkillError(rel_path, f"invalid frontmatter: {e}")
        except (OSError, UnicodeDecodeError) as e:
            raise MalformedSkillError(rel_path, f"unreadable: {e}")

    def _parse_all(self) -> tuple[list[Skill], list[CorpusIssue]]:
        """Parse all skill directories, preserving sorted directory order."""
        skill_dirs = self.discover()

        if self.max_workers > 1 and len(skill_dirs) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                outcomes = list(executor.map(self._try_load_skill, skill_dirs))
        else:
            outcomes = [self._try_load_skill(d) for d in skill_dirs]

        skills: list[Skill] = []
        issues: list[CorpusIssue] = []
        for outcome in outcomes:
            if isinstance(outcome, Skill):
                skills.append(outcome)
            else:
                logger.warning(str(outcome))
                issues.append(
                    CorpusIssue(
                        kind="malformed",
                        path=outcome.path.as_posix(),
                        message=outcome.reason,
                        skill_id=outcome.skill_id,
                    )
                )
        return skills, issues

    def _try_load_skill(self, skill_dir: Path) -> Skill | MalformedSkillError:
        try:
            return self.load_skill(skill_dir)
        except MalformedSkillError as e:
            return e

    @staticmethod
    def _find_duplicates(skills: list[Skill]) -> dict[str, list[str]]:
        by_id: dict[str, list[str]] = defaultdict(list)
        for skill in skills:
            by_id[skill.id].append(skill.path)
        return {k: sorted(v) for k, v in by_id.items() if len(v) > 1}

    def _relative(self, path: Path) -> str:
        try:
            return path.relative_to(self.skills_path).as_posix()
        except ValueError:
            return path.as_posix()

    def _parse_skill(
        self, skill_dir: Path, frontmatter: dict[str, Any], body: str
    ) -> Skill:
        """Validate header fields and build the Skill (callback for parse_definition)."""
        rel_path = self._relative(skill_dir)

        if not frontmatter:
            raise MalformedSkillError(rel_path, "missing frontmatter")

        skill_id = self._validate_id(rel_path, frontmatter)
        description = self._validate_description(rel_path, skill_id, frontmatter)

        overview_body = body.strip()
        line_count = len(overview_body.splitlines())
        if line_count > self.max_overview_lines:
            raise MalformedSkillError(
                rel_path,
                f"overview has {line_count} lines, limit is {self.max_overview_lines}",
                skill_id,
            )

        keywords = set(tokenize(skill_id)) | set(tokenize(description))
        for extra in self._extra_keywords(rel_path, skill_id, frontmatter):
            keywords.update(tokenize(extra))

        parent = skill_dir.parent
        category = None
        if skill_dir != self.skills_path and parent != self.skills_path:
            category = self._relative(parent)

        return Skill(
            id=skill_id,
            description=description,
            overview_body=overview_body,
            overview_size=estimate_size(overview_body, self.size_unit),
            path=rel_path,
            category=category,
            keywords=frozenset(keywords),
            references=tuple(self._load_references(skill_dir, skill_id)),
        )

    def _validate_id(self, rel_path: str, frontmatter: dict[str, Any]) -> str:
        name = frontmatter.get("name")
        alias = frontmatter.get("id")
        if name is not None and alias is not None and name != alias:
            raise MalformedSkillError(
                rel_path, f"'name' ({name}) and 'id' ({alias}) disagree"
            )

        skill_id = name if name is not None else alias
        if skill_id is None:
            raise MalformedSkillError(rel_path, "missing required field 'name'")
        if not isinstance(skill_id, str):
            raise MalformedSkillError(rel_path, "'name' must be a string")
        if len(skill_id) > MAX_SKILL_ID_LENGTH:
            raise MalformedSkillError(
                rel_path, f"id exceeds {MAX_SKILL_ID_LENGTH} characters"
            )
        if not SKILL_ID_RE.match(skill_id):
            raise MalformedSkillError(
                rel_path,
                f"id '{skill_id}' must be lowercase alphanumerics and single hyphens",
            )
        return skill_id

    def _validate_description(
        self, rel_path: str, skill_id: str, frontmatter: dict[str, Any]
    ) -> str:
        if "description" not in frontmatter:
            raise MalformedSkillError(
                rel_path, "missing required field 'description'", skill_id
            )

        description = frontmatter["description"]
        if not isinstance(description, str) or not description.strip():
            raise MalformedSkillError(
                rel_path, "description must be a non-empty string", skill_id
            )

        description = description.strip()
        if len(description) > MAX_DESCRIPTION_LENGTH:
            raise MalformedSkillError(
                rel_path,
                f"description has {len(description)} characters, "
                f"limit is {MAX_DESCRIPTION_LENGTH}",
                skill_id,
            )
        return description

    @staticmethod
    def _extra_keywords(
        rel_path: str, skill_id: str, frontmatter: dict[str, Any]
    ) -> list[str]:
        raw = frontmatter.get("keywords")
        if raw is None:
            return []
        if isinstance(raw, str):
            return [raw]
        if isinstance(raw, list) and all(isinstance(k, str) for k in raw):
            return raw
        raise MalformedSkillError(
            rel_path, "'keywords' must be a string or a list of strings", skill_id
        )

    def _load_references(self, skill_dir: Path, skill_id: str) -> list[ReferenceDoc]:
        """Collect reference documents owned by this skill, sorted by path."""
        refs = []
        for ref_file in sorted(skill_dir.rglob(f"*{REFERENCE_SUFFIX}")):
            rel = ref_file.relative_to(skill_dir)
            if rel.as_posix() == SKILL_FILE or not ref_file.is_file():
                continue
            if any(part.startswith(".") for part in rel.parts):
                continue
            if self._inside_nested_skill(skill_dir, ref_file):
                continue

            body = ref_file.read_text(encoding="utf-8")
            if has_frontmatter(body):
                raise MalformedSkillError(
                    self._relative(skill_dir),
                    f"reference '{rel.as_posix()}' must not have frontmatter",
                    skill_id,
                )
            refs.append(
                ReferenceDoc(
                    skill_id=skill_id,
                    path=rel.as_posix(),
                    body=body,
                    size_estimate=estimate_size(body, self.size_unit),
                )
            )

        return sorted(refs, key=lambda ref: ref.path)

    @staticmethod
    def _inside_nested_skill(skill_dir: Path, ref_file: Path) -> bool:
        parent = ref_file.parent
        while parent != skill_dir:
            if (parent / SKILL_FILE).exists():
                return True
            parent = parent.parent
        return False


def load_corpus(
    skills_path: Path,
    size_unit: SizeUnit = "lines",
    max_overview_lines: int = 500,
    max_workers: int = 1,
) -> Corpus:
    """Load a corpus from ``skills_path``. See SkillLoader.load."""
    return SkillLoader(
        skills_path,
        size_unit=size_unit,
        max_overview_lines=max_overview_lines,
        max_workers=max_workers,
    ).load()
