"""Layered YAML settings with include directive support."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import yaml
from platformdirs import user_config_dir
from pydantic_settings import BaseSettings, YamlConfigSettingsSource

from gitpromote.core.log import logger

APP_NAME = "gitpromote"
SETTINGS_FILENAME = "gitpromote.yaml"

# Workflow keys a settings file may also carry at its top level
WORKFLOW_KEYS = (
    "pullStrategy",
    "mergeStrategy",
    "autoSwitchBack",
    "allowForcePush",
    "enforceConventionalCommits",
    "branchPrefixes",
)


def default_settings_file() -> Path:
    return Path(__file__).parent.parent / "defaults" / "default.yaml"


def user_settings_file() -> Path:
    return Path(user_config_dir(APP_NAME, appauthor=False)) / SETTINGS_FILENAME


def project_settings_file() -> Path:
    return Path(SETTINGS_FILENAME)


class YamlWithIncludesSettingsSource(YamlConfigSettingsSource):
    """YAML settings source merging every settings layer.

    Layers, lowest priority first:
        packaged defaults < user file < project file < --include files

    Each file may carry an ``include:`` directive naming further
    files, resolved relative to the including file. Mappings are
    deep-merged key by key; any other value, lists included, is
    replaced by the later layer.
    """

    def __init__(
        self, settings_cls: type[BaseSettings], yaml_file=None
    ):
        """Collect --include arguments and load every layer.

        Args:
            settings_cls: The settings class being initialized
            yaml_file: Extra file(s) loaded after the project file
        """
        includes = []
        i = 1
        while i < len(sys.argv):
            if sys.argv[i] == "--include" and i + 1 < len(sys.argv):
                includes.append(sys.argv[i + 1])
                i += 1
            i += 1

        extra = yaml_file or settings_cls.model_config.get("yaml_file")
        if extra and includes:
            yaml_file = (
                [extra] if isinstance(extra, (str, os.PathLike))
                else list(extra)
            ) + includes
        elif includes:
            yaml_file = includes
        else:
            yaml_file = extra

        super().__init__(settings_cls, yaml_file)

    def _read_files(self, files, deep_merge: bool = False):  # noqa: ARG002
        """Load and deep-merge all settings layers.

        Args:
            files: Extra file path(s) from yaml_file or --include

        Returns:
            Merged settings dictionary
        """
        files_to_load = [
            default_settings_file(),
            user_settings_file(),
            project_settings_file(),
        ]
        if files:
            if isinstance(files, (str, os.PathLike)):
                files = [files]
            files_to_load.extend(Path(f).expanduser() for f in files)

        result = {}
        for file_path in files_to_load:
            if file_path.is_file():
                logger.debug("Loading settings", file=str(file_path))
                data = self._load_file_recursive(file_path, set())
                data = self._nest_workflow_keys(data)
                result = self._deep_merge(result, data)
            else:
                logger.debug(
                    "Settings file not found (skipping)",
                    file=str(file_path),
                )
        return result

    def _load_file_recursive(
        self, filepath: Path, visited: set[Path]
    ) -> dict:
        """Load one file, resolving include: directives.

        Raises:
            ValueError: If an include cycle is found
        """
        if filepath in visited:
            raise ValueError(f"Circular include: {filepath}")
        visited.add(filepath)

        with open(filepath, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(
                f"Settings file {filepath} must contain a mapping"
            )

        if "include" in data:
            includes = data.pop("include") or []
            if isinstance(includes, str):
                includes = [includes]

            for inc in includes:
                inc_path = self._resolve_path(inc, filepath)
                inc_data = self._load_file_recursive(
                    inc_path, visited.copy()
                )
                # Including file overrides what it includes
                data = self._deep_merge(inc_data, data)

        return data

    def _nest_workflow_keys(self, data: dict) -> dict:
        """Move top-level workflow keys under config.workflow.

        A flat file such as ``{"pullStrategy": "merge"}`` then means
        the same as the nested form. Nested values win when a file
        carries both.
        """
        flat = {key: data.pop(key) for key in WORKFLOW_KEYS if key in data}
        if not flat:
            return data
        logger.debug("Top-level workflow keys", keys=sorted(flat))
        return self._deep_merge(
            {"config": {"workflow": flat}}, data
        )

    def _resolve_path(
        self, include_path: str, relative_to: Path
    ) -> Path:
        path = Path(include_path).expanduser()
        if path.is_absolute():
            return path
        return (relative_to.parent / path).resolve()

    def _deep_merge(self, base: dict, override: dict) -> dict:
        """Return base with override merged in (override wins)."""
        result = base.copy()
        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result
