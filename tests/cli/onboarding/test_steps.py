"""Unit tests for onboarding step classes."""

from pathlib import Path
from unittest.mock import patch

import pytest
import yaml
from rich.console import Console

from skillscout.cli.onboarding.steps import (
    BaseStep,
    CheckWorkspaceStep,
    ConfigureApiStep,
    ConfigureRetrievalStep,
    CreateExampleSkillStep,
    SaveConfigStep,
)
from skillscout.core.skill_loader import SkillLoader
from skillscout.utils.config import Config

STEPS = "skillscout.cli.onboarding.steps"


class TestBaseStep:
    def test_init_stores_dependencies(self, tmp_path: Path):
        """BaseStep stores workspace and console."""
        console = Console()

        step = BaseStep(tmp_path, console)

        assert step.workspace == tmp_path
        assert step.console is console

    def test_run_raises_not_implemented(self, tmp_path: Path):
        """BaseStep.run raises NotImplementedError."""
        with pytest.raises(NotImplementedError):
            BaseStep(tmp_path, Console()).run({})


class TestCheckWorkspaceStep:
    def test_fresh_workspace_proceeds(self, tmp_path: Path):
        """A workspace without config proceeds without prompting."""
        with patch(f"{STEPS}.questionary.confirm") as mock_confirm:
            result = CheckWorkspaceStep(tmp_path, Console()).run({})

        assert result is True
        mock_confirm.assert_not_called()

    def test_existing_config_declined(self, tmp_path: Path):
        """Declining to overwrite an existing config aborts."""
        (tmp_path / "config.user.yaml").write_text("{}\n")

        with patch(f"{STEPS}.questionary.confirm") as mock_confirm:
            mock_confirm.return_value.ask.return_value = False
            result = CheckWorkspaceStep(tmp_path, Console()).run({})

        assert result is False


class TestConfigureRetrievalStep:
    def test_collects_settings(self, tmp_path: Path):
        """Answers are stored as skills_path and retrieval settings."""
        state: dict = {}

        with (
            patch(f"{STEPS}.questionary.text") as mock_text,
            patch(f"{STEPS}.questionary.select") as mock_select,
        ):
            mock_text.return_value.ask.side_effect = ["corpus", "500"]
            mock_select.return_value.ask.return_value = "tokens"
            result = ConfigureRetrievalStep(tmp_path, Console()).run(state)

        assert result is True
        assert state == {
            "skills_path": "corpus",
            "retrieval": {"size_unit": "tokens", "default_budget": 500},
        }

    def test_cancelled_prompt_aborts(self, tmp_path: Path):
        """A cancelled prompt aborts the step."""
        state: dict = {}

        with patch(f"{STEPS}.questionary.text") as mock_text:
            mock_text.return_value.ask.return_value = None
            result = ConfigureRetrievalStep(tmp_path, Console()).run(state)

        assert result is False
        assert state == {}


class TestConfigureApiStep:
    def test_skipped_by_default(self, tmp_path: Path):
        """API settings are skipped unless requested."""
        state: dict = {}

        with patch(f"{STEPS}.questionary.confirm") as mock_confirm:
            mock_confirm.return_value.ask.return_value = False
            result = ConfigureApiStep(tmp_path, Console()).run(state)

        assert result is True
        assert "api" not in state

    def test_collects_address(self, tmp_path: Path):
        """Host and port are stored when requested."""
        state: dict = {}

        with (
            patch(f"{STEPS}.questionary.confirm") as mock_confirm,
            patch(f"{STEPS}.questionary.text") as mock_text,
        ):
            mock_confirm.return_value.ask.return_value = True
            mock_text.return_value.ask.side_effect = ["0.0.0.0", "9000"]
            result = ConfigureApiStep(tmp_path, Console()).run(state)

        assert result is True
        assert state["api"] == {"host": "0.0.0.0", "port": 9000}


class TestSaveConfigStep:
    def test_writes_loadable_config(self, tmp_path: Path):
        """SaveConfigStep writes a config that Config.load accepts."""
        workspace = tmp_path / "workspace"
        state = {"skills_path": "corpus", "retrieval": {"default_budget": 100}}

        result = SaveConfigStep(workspace, Console()).run(state)

        assert result is True
        assert (workspace / "corpus").is_dir()
        assert (workspace / ".logs").is_dir()
        saved = yaml.safe_load((workspace / "config.user.yaml").read_text())
        assert saved == {"skills_path": "corpus", "retrieval": {"default_budget": 100}}
        config = Config.load(workspace)
        assert config.skills_path == workspace / "corpus"
        assert config.retrieval.default_budget == 100
        assert state["_skills_dir"] == workspace / "corpus"

    def test_invalid_settings_abort(self, tmp_path: Path):
        """Invalid settings abort without writing."""
        state = {"retrieval": {"default_budget": 0}}

        result = SaveConfigStep(tmp_path, Console()).run(state)

        assert result is False
        assert not (tmp_path / "config.user.yaml").exists()


class TestCreateExampleSkillStep:
    def test_creates_loadable_skill(self, tmp_path: Path):
        """The example skill loads cleanly with its reference."""
        skills_dir = tmp_path / "skills"
        skills_dir.mkdir()

        with patch(f"{STEPS}.questionary.confirm") as mock_confirm:
            mock_confirm.return_value.ask.return_value = True
            result = CreateExampleSkillStep(tmp_path, Console()).run(
                {"_skills_dir": skills_dir}
            )

        assert result is True
        corpus = SkillLoader(skills_dir).load()
        assert corpus.skill_ids == ["example-skill"]
        assert corpus.errors == ()
        skill = corpus.get("example-skill")
        assert [ref.path for ref in skill.references] == ["references/details.md"]

    def test_skipped_when_corpus_not_empty(self, tmp_path: Path, pattern_skills: Path):
        """No example skill is offered when skills exist."""
        with patch(f"{STEPS}.questionary.confirm") as mock_confirm:
            result = CreateExampleSkillStep(tmp_path, Console()).run(
                {"_skills_dir": pattern_skills}
            )

        assert result is True
        mock_confirm.assert_not_called()
        assert not (pattern_skills / "example-skill").exists()
