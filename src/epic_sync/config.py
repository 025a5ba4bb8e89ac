from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

# GitHub Actions exposes `with:` inputs as INPUT_<NAME>, keeping dashes.
INPUT_NAMES = {
    "epic_prefix": ("INPUT_EPIC-PREFIX", "INPUT_EPIC_PREFIX"),
    "tasks_marker": ("INPUT_TASKS-MARKER", "INPUT_TASKS_MARKER"),
    "close_completed_epics": ("INPUT_CLOSE-COMPLETED-EPICS", "INPUT_CLOSE_COMPLETED_EPICS"),
}
TOKEN_NAMES = ("INPUT_SECRET-TOKEN", "INPUT_SECRET_TOKEN", "GITHUB_TOKEN", "GH_TOKEN")


class SyncConfig(BaseModel):
    """Settings fixed for the whole run."""

    model_config = ConfigDict(frozen=True)

    epic_prefix: str = Field(..., description="Title prefix that identifies an Epic")
    tasks_marker: str = Field("Workload", description="Suffix of the heading above the checklist")
    close_completed_epics: bool = Field(False, description="Close an Epic once all its tasks are closed")

    @field_validator("epic_prefix", "tasks_marker")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("must not be empty")
        return v


def _read_yaml(path: str | os.PathLike[str]) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise ConfigurationError(f"Config file not found: {path}")
    with p.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    # Support a top-level 'epic_sync' key or direct fields
    if isinstance(data.get("epic_sync"), dict):
        data = data["epic_sync"]
    return {str(k).replace("-", "_"): v for k, v in data.items()}


def _read_env(env: Mapping[str, str]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for key, names in INPUT_NAMES.items():
        for name in names:
            value = env.get(name)
            if value is not None and value != "":
                values[key] = value.strip() if key == "close_completed_epics" else value
                break
    return values


def load_config(
    path: Optional[str | os.PathLike[str]] = None,
    env: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> SyncConfig:
    """Build the run configuration from a YAML file, the environment and overrides.

    Later sources win: file, then environment, then explicit overrides.
    """
    env = os.environ if env is None else env
    data: Dict[str, Any] = {}
    if path:
        data.update(_read_yaml(path))
    data.update(_read_env(env))
    data.update({k: v for k, v in overrides.items() if v is not None})
    try:
        config = SyncConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
    logger.debug("Loaded configuration: %s", config)
    return config


def resolve_token(token: Optional[str] = None, env: Optional[Mapping[str, str]] = None) -> str:
    env = os.environ if env is None else env
    if token:
        return token
    for name in TOKEN_NAMES:
        if env.get(name):
            return env[name]
    raise ConfigurationError("A GitHub token is required (--token, INPUT_SECRET-TOKEN or GITHUB_TOKEN)")


def resolve_repo(repo: Optional[str] = None, env: Optional[Mapping[str, str]] = None) -> str:
    env = os.environ if env is None else env
    repo = repo or env.get("GITHUB_REPOSITORY")
    if not repo or "/" not in repo:
        raise ConfigurationError("Repository must be given as owner/name (--repo or GITHUB_REPOSITORY)")
    return repo
