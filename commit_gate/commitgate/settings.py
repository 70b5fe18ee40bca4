"""Server settings for the commit gate and logging setup."""

from __future__ import annotations

import logging
import os
from io import StringIO
from pathlib import Path

from pydantic import BaseModel, Field
from ruamel.yaml import YAML

from commitgate.context.models import PersonIdent

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = "/etc/commitgate/settings.yaml"
DEFAULT_MAX_FILES = 100_000


class GateSettings(BaseModel):
    """Options read once at startup and shared by every pipeline."""

    install_commit_msg_hook_command: str | None = None
    max_files: int = DEFAULT_MAX_FILES
    canonical_web_url: str | None = None
    all_projects: str = "All-Projects"
    all_users: str = "All-Users"
    server_ident: PersonIdent = Field(
        default_factory=lambda: PersonIdent(name="Code Review", email="code-review@localhost")
    )


def load_settings() -> GateSettings:
    """Load settings from the YAML file or the environment as a fallback."""
    settings_path = Path(os.environ.get("COMMITGATE_SETTINGS_PATH", DEFAULT_SETTINGS_PATH))
    if settings_path.exists():
        yaml = YAML(typ="safe")
        data = yaml.load(StringIO(settings_path.read_text(encoding="utf-8"))) or {}
        logger.info("Loaded settings from %s", settings_path)
        return GateSettings.model_validate(data)

    options = {
        "install_commit_msg_hook_command": os.environ.get(
            "COMMITGATE_INSTALL_COMMIT_MSG_HOOK_COMMAND"
        ),
        "max_files": int(os.environ.get("COMMITGATE_MAX_FILES", str(DEFAULT_MAX_FILES))),
        "canonical_web_url": os.environ.get("COMMITGATE_CANONICAL_WEB_URL"),
        "all_projects": os.environ.get("COMMITGATE_ALL_PROJECTS", "All-Projects"),
        "all_users": os.environ.get("COMMITGATE_ALL_USERS", "All-Users"),
    }
    return GateSettings.model_validate(options)


def configure_logging(dev_mode: bool | None = None) -> None:
    """Set up root logging; DEBUG in dev mode, INFO otherwise."""
    if dev_mode is None:
        dev_mode = bool(os.environ.get("COMMITGATE_DEV_MODE"))
    logging.basicConfig(
        level=logging.DEBUG if dev_mode else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
