"""Configuration management for skillscout."""

import logging
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

logger = logging.getLogger(__name__)

SizeUnit = Literal["lines", "tokens"]


# ============================================================================
# Configuration Models
# ============================================================================


class RetrievalConfig(BaseModel):
    """Matching and disclosure settings."""

    size_unit: SizeUnit = "lines"
    default_budget: int = Field(default=2000, gt=0)
    min_score: float = Field(default=0.0, ge=0.0, lt=1.0)
    max_results: int | None = Field(default=None, gt=0)
    max_active_skills: int | None = Field(default=None, gt=0)
    max_overview_lines: int = Field(default=500, gt=0)
    load_workers: int = Field(default=1, gt=0)


class ApiConfig(BaseModel):
    """HTTP API configuration."""

    host: str = "127.0.0.1"
    port: int = Field(default=8000, gt=0, lt=65536)


# ============================================================================
# Main Configuration Class
# ============================================================================


class Config(BaseModel):
    """
    Main configuration for skillscout.

    Configuration is loaded from the workspace directory:
    1. config.user.yaml - User configuration (optional)
    2. config.runtime.yaml - Runtime state (optional, overrides user)

    Runtime config takes precedence over user config. Pydantic defaults are used
    for fields not specified in config files.
    """

    workspace: Path
    skills_path: Path = Field(default=Path("skills"))
    logging_path: Path = Field(default=Path(".logs"))
    retrieval: RetrievalConfig = Field(default_factory=RetrievalConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)

    @model_validator(mode="after")
    def resolve_paths(self) -> "Config":
        """Resolve relative paths to absolute using workspace."""
        for field_name in ("skills_path", "logging_path"):
            path = getattr(self, field_name)
            if path.is_absolute():
                if path.is_relative_to(self.workspace):
                    continue
                raise ValueError(f"{field_name} must be relative, got: {path}")
            setattr(self, field_name, self.workspace / path)
        return self

    @classmethod
    def load(cls, workspace_dir: Path) -> "Config":
        """
        Load configuration from a workspace directory.

        Args:
            workspace_dir: Path to workspace directory

        Returns:
            Config instance with all settings loaded and validated

        Raises:
            ValidationError: If configuration is invalid
        """
        return cls.model_validate(cls._read_layers(workspace_dir))

    @classmethod
    def _read_layers(
        cls, workspace_dir: Path, replaced: dict[str, dict[str, Any]] | None = None
    ) -> dict[str, Any]:
        """
        Read user then runtime YAML and deep merge them.

        ``replaced`` maps a layer file name to data used instead of that file.
        """
        config_data: dict[str, Any] = {"workspace": workspace_dir}
        replaced = replaced or {}

        for name in ("config.user.yaml", "config.runtime.yaml"):
            config_file = workspace_dir / name
            if name in replaced:
                data = replaced[name]
            elif config_file.exists():
                with open(config_file) as f:
                    data = yaml.safe_load(f) or {}
            else:
                continue
            config_data = cls._deep_merge(config_data, data)

        return config_data

    @staticmethod
    def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """
        Deep merge override dict into base dict.

        Args:
            base: Base dictionary
            override: Override dictionary (takes precedence)

        Returns:
            Merged dictionary
        """
        result = base.copy()

        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = Config._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def _set_nested(self, obj: dict, key: str, value: Any) -> None:
        """Set a nested value in a dict using dot notation."""
        keys = key.split(".")
        for k in keys[:-1]:
            if k not in obj or not isinstance(obj[k], dict):
                obj[k] = {}
            obj = obj[k]
        obj[keys[-1]] = value

    def _set_config_value(self, config_path: Path, key: str, value: Any) -> None:
        """
        Update a dotted config key in a YAML file.

        Raises:
            ValidationError: If the resulting configuration is invalid; the
                file is left untouched
        """
        if config_path.exists():
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        else:
            data = {}

        self._set_nested(data, key, value)
        Config.model_validate(
            self._read_layers(self.workspace, replaced={config_path.name: data})
        )

        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w") as f:
            yaml.dump(data, f)

    def set_user(self, key: str, value: Any) -> None:
        """
        Update a config value in config.user.yaml and reload.

        Args:
            key: Config key (supports dot notation, e.g., "retrieval.default_budget")
            value: New value
        """
        self._set_config_value(self.workspace / "config.user.yaml", key, value)
        self.reload()

    def set_runtime(self, key: str, value: Any) -> None:
        """
        Update a runtime value in config.runtime.yaml and reload.

        Args:
            key: Config key (supports dot notation)
            value: New value
        """
        self._set_config_value(self.workspace / "config.runtime.yaml", key, value)
        self.reload()

    def reload(self) -> bool:
        """
        Re-read config.user.yaml and merge with runtime.

        Returns:
            True if reload succeeded, False if the files are invalid
        """
        try:
            new_config = Config.model_validate(self._read_layers(self.workspace))
        except (ValidationError, yaml.YAMLError) as e:
            logger.warning(f"Config reload failed: {e}")
            return False

        for field_name in Config.model_fields:
            setattr(self, field_name, getattr(new_config, field_name))
        return True
