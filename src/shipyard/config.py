"""Configuration loading for Shipyard.

Configuration is resolved once, at startup, into a ``ShipyardConfig`` that is
handed to the engine. Nothing below the CLI/API layer reads the environment.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.notion.com/v1"
DEFAULT_NOTION_VERSION = "2025-09-03"
DEFAULT_STATE_FILE = "humanize_state.json"
DEFAULT_RATE_LIMIT_DELAY = 0.35  # seconds between remote calls
DEFAULT_PAGE_SIZE = 100
DEFAULT_BLOCK_CHUNK_SIZE = 2000  # remote per-block text ceiling

# Environment variable -> config key
ENV_KEYS = {
    "NOTION_SHIPYARD_API_KEY": "api_key",
    "NOTION_SHIPYARD_DB_ID": "database_id",
    "TARGET_APP": "target_app",
    "NOTION_AI_SQUAD_USER_ID": "acting_identity_id",
    "SHIPYARD_STATE_FILE": "state_file",
}


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""


@dataclass
class ShipyardConfig:
    """Shipyard runtime configuration.

    Attributes:
        api_key: Bearer credential for the Notion API.
        database_id: Id of the Shipyard database holding the ticket data source.
        target_app: Scope tag; only tickets for this application are queued.
            Empty means no application filtering.
        acting_identity_id: User id of the automation actor. Empty means every
            ticket is eligible regardless of assignee.
        team_users: Team member name -> Notion user id.
        state_file: Path of the persisted snapshot.
    """

    api_key: str = ""
    database_id: str = ""
    target_app: str = ""
    acting_identity_id: str = ""
    team_users: dict[str, str] = field(default_factory=dict)
    state_file: Path = field(default_factory=lambda: Path(DEFAULT_STATE_FILE))
    api_base: str = DEFAULT_API_BASE
    notion_version: str = DEFAULT_NOTION_VERSION
    rate_limit_delay: float = DEFAULT_RATE_LIMIT_DELAY
    page_size: int = DEFAULT_PAGE_SIZE
    block_chunk_size: int = DEFAULT_BLOCK_CHUNK_SIZE

    def __post_init__(self) -> None:
        self.state_file = Path(self.state_file)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ShipyardConfig:
        """Create config from a mapping (YAML document or collected env values).

        Unknown keys are ignored.

        Raises:
            ConfigError: If team_users is not a name -> id mapping.
        """
        team_users = data.get("team_users") or {}
        if not isinstance(team_users, Mapping):
            raise ConfigError(
                f"team_users must be a mapping of name to user id, got {type(team_users).__name__}"
            )

        kwargs: dict[str, Any] = {
            "team_users": {str(name): str(user_id) for name, user_id in team_users.items()},
        }
        for key in (
            "api_key",
            "database_id",
            "target_app",
            "acting_identity_id",
            "api_base",
            "notion_version",
        ):
            if data.get(key):
                kwargs[key] = str(data[key])
        if data.get("state_file"):
            kwargs["state_file"] = Path(data["state_file"])
        if data.get("rate_limit_delay") is not None:
            kwargs["rate_limit_delay"] = float(data["rate_limit_delay"])
        if data.get("page_size") is not None:
            kwargs["page_size"] = int(data["page_size"])
        if data.get("block_chunk_size") is not None:
            kwargs["block_chunk_size"] = int(data["block_chunk_size"])

        config = cls(**kwargs)
        config.warn_if_unscoped()
        return config

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ShipyardConfig:
        """Create config from environment variables.

        TEAM_USERS is read as a JSON object. Invalid JSON is logged and
        treated as an empty map.

        Args:
            environ: Environment mapping. Defaults to ``os.environ``.
        """
        if environ is None:
            environ = os.environ

        data: dict[str, Any] = {}
        for env_key, config_key in ENV_KEYS.items():
            value = environ.get(env_key, "")
            if value:
                data[config_key] = value

        raw_team = environ.get("TEAM_USERS", "")
        if raw_team:
            try:
                team = json.loads(raw_team)
            except json.JSONDecodeError:
                logger.warning("TEAM_USERS is not valid JSON; using an empty map")
                team = {}
            if not isinstance(team, dict):
                logger.warning("TEAM_USERS must be a JSON object; using an empty map")
                team = {}
            data["team_users"] = team

        return cls.from_dict(data)

    def warn_if_unscoped(self) -> None:
        """Log a warning when no scope tag is configured."""
        if not self.target_app:
            logger.warning("TARGET_APP is not set; tickets will not be filtered by application")

    def require_remote(self) -> None:
        """Fail fast when the remote store cannot be reached with this config.

        Raises:
            ConfigError: If the API key or database id is missing.
        """
        missing = []
        if not self.api_key:
            missing.append("NOTION_SHIPYARD_API_KEY")
        if not self.database_id:
            missing.append("NOTION_SHIPYARD_DB_ID")
        if missing:
            raise ConfigError(f"Missing required configuration: {', '.join(missing)}")

    def resolve_assignee(self, name: str) -> str | None:
        """Map a team member name to a user id, or None if unknown."""
        return self.team_users.get(name)


def load_config(config_path: Path | str) -> ShipyardConfig:
    """Load Shipyard configuration from a YAML file.

    Args:
        config_path: Path to shipyard.yaml file.

    Returns:
        Parsed configuration object.

    Raises:
        ConfigError: If file doesn't exist or is invalid.
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration must be a YAML mapping, got {type(data).__name__}")

    return ShipyardConfig.from_dict(data)
