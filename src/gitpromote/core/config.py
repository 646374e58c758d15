"""Application state and configuration."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import platformdirs
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from gitpromote.core.base import BaseConfig, BaseState
from gitpromote.core.log import Logger
from gitpromote.core.yaml_settings import YamlWithIncludesSettingsSource

# ============================================================
# CONFIG MODELS (loaded from YAML/env/CLI)
# ============================================================


class PullStrategy(str, Enum):
    """How a branch is brought up to date with its remote."""

    REBASE = "rebase"
    MERGE = "merge"


class MergeStrategy(str, Enum):
    """How the source branch is merged into the target."""

    NO_FF = "no-ff"
    FF_ONLY = "ff-only"
    SQUASH = "squash"

    @property
    def flag(self) -> str:
        return f"--{self.value}"


class WorkflowConfig(BaseConfig):
    """Promotion workflow settings.

    Keys use the camelCase names found in settings files; the
    snake_case attribute names are accepted too.
    """

    model_config = ConfigDict(populate_by_name=True)

    pull_strategy: PullStrategy = Field(
        default=PullStrategy.REBASE,
        alias="pullStrategy",
        description="Default pull strategy: 'rebase' or 'merge'",
    )
    merge_strategy: MergeStrategy = Field(
        default=MergeStrategy.NO_FF,
        alias="mergeStrategy",
        description="Default merge strategy: 'no-ff', 'ff-only' or 'squash'",
    )
    auto_switch_back: bool = Field(
        default=True,
        alias="autoSwitchBack",
        description="Offer to check out the original branch when done",
    )
    allow_force_push: bool = Field(
        default=False,
        alias="allowForcePush",
        description=(
            "Default answer of the force-with-lease prompt after a "
            "rejected push"
        ),
    )
    enforce_conventional_commits: bool = Field(
        default=False,
        alias="enforceConventionalCommits",
        description="Reject commit messages not in Conventional Commits form",
    )
    branch_prefixes: list[str] = Field(
        default_factory=lambda: ["feature/", "bugfix/", "hotfix/"],
        alias="branchPrefixes",
        description="Expected source branch prefixes (warning only)",
    )


class Config(BaseConfig):
    """Application configuration loaded from YAML/env/CLI."""

    logger: Logger | None = Field(
        default=None,
        description="Logger configuration and runtime instance",
    )
    repo_path: Path = Field(
        default_factory=Path.cwd,
        description="Working tree of the repository to promote from",
    )
    remote: str = Field(
        default="origin",
        description="Name of the remote holding the shared branches",
    )
    workflow: WorkflowConfig = Field(
        default_factory=WorkflowConfig,
        description="Promotion workflow settings",
    )
    log_level: str = Field(
        default="info",
        alias="log-level",
        description=(
            "Default log level: 'spew', 'trace', 'debug', 'info', "
            "'warn', 'error', 'fatal'"
        ),
    )
    log_root: Path = Field(
        default_factory=(
            lambda: Path(platformdirs.user_state_dir()) / "gitpromote"
        ),
        description="Root directory for log files",
    )

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode='after')
    def _setup_logger(self) -> 'Config':
        """Install the global logger from the loaded sink settings."""
        from gitpromote.core.log import setup_logger

        if self.logger is None:
            self.logger = Logger(level=self.log_level)

        self.logger = setup_logger(
            log_root=self.log_root,
            run_name="promote",
            console=self.logger.console,
            otlp=self.logger.otlp,
            file=self.logger.file,
            level=self.log_level,
        )
        return self

    def close(self):
        """Close the global logger, then any other closeable children."""
        from gitpromote.core.log import logger
        if logger is not None:
            logger.close()
        super().close()


# ============================================================
# RUNTIME STATE (mutable during one run)
# ============================================================


class PromotionState(BaseState):
    """State of one promotion run; discarded when the process exits."""

    original_branch: str | None = Field(
        default=None,
        description="Branch checked out when the run started",
    )
    target_branch: str = Field(
        default="test",
        description="Fixed destination of this run: 'test' or 'main'",
    )
    source_pull_strategy: PullStrategy | None = None
    target_pull_strategy: PullStrategy | None = None
    merge_strategy: MergeStrategy | None = None
    resumed_merge: bool = Field(
        default=False,
        description="An interrupted merge was committed during ResumeCheck",
    )
    ci_url: str | None = None
    status: str = Field(
        default="pending",
        description="pending, running, complete, halted",
    )


class Runtime(BaseModel):
    """All runtime state, grouped by workflow."""

    promotion: PromotionState = Field(default_factory=PromotionState)


# ============================================================
# STATE (config + runtime combined)
# ============================================================


class State(BaseSettings):
    """Complete application state: configuration plus runtime.

    This is the object that flows through the workflow graph.
    """

    config: Config = Field(
        description="Application configuration (from YAML/env/CLI)"
    )
    runtime: Runtime = Field(
        default_factory=Runtime,
        description="Runtime state (mutates during workflow execution)",
    )
    dry_run: bool = Field(
        default=False,
        validation_alias=AliasChoices("dry-run", "dry_run"),
        description=(
            "Print the git commands that would change the repository "
            "instead of running them (also DRY_RUN=true)"
        ),
    )
    include: list[str] | None = Field(
        default=None,
        description=(
            "Additional YAML files to include and merge, "
            "highest priority last"
        ),
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="GITPROMOTE_",
        env_nested_delimiter="__",
        cli_implicit_flags=True,
        cli_use_class_docs_for_groups=True,
        arbitrary_types_allowed=True,
        extra='ignore',
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Priority, highest first: init/CLI, YAML layers, .env,
        environment, secrets."""
        return (
            init_settings,
            YamlWithIncludesSettingsSource(settings_cls),
            dotenv_settings,
            env_settings,
            file_secret_settings,
        )


__all__ = [
    "Config",
    "MergeStrategy",
    "PromotionState",
    "PullStrategy",
    "Runtime",
    "State",
    "WorkflowConfig",
]
