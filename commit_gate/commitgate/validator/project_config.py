"""Validates pushes to the project configuration branch."""

from __future__ import annotations

import logging

from commitgate.backends.base import ProjectConfigLoader
from commitgate.context.models import AccountUser, ValidationContext
from commitgate.errors import ConfigInvalidError
from commitgate.refs import REFS_CONFIG
from commitgate.validator.base import CommitValidator
from commitgate.validator.models import Outcome, Rejection, ValidationInfo, ValidationMessage

logger = logging.getLogger(__name__)

INVALID_CONFIG_MSG = "invalid project configuration"


class ConfigValidator(CommitValidator):
    """If this is the project configuration branch, validate the config."""

    name = "project_config"

    def __init__(
        self,
        config_loader: ProjectConfigLoader,
        user: AccountUser,
        all_users: str,
        all_projects: str,
    ) -> None:
        self._config_loader = config_loader
        self._user = user
        self._all_users = all_users
        self._all_projects = all_projects

    def validate_commit(self, context: ValidationContext) -> Outcome:
        if context.branch != REFS_CONFIG:
            return ValidationInfo.not_applicable()

        messages: list[ValidationMessage] = []
        try:
            cfg = self._config_loader.load(context.project, context.commit.id)
        except (ConfigInvalidError, OSError) as e:
            if isinstance(e, ConfigInvalidError) and str(e):
                messages.append(ValidationMessage.error(str(e)))
            logger.error(
                "User %s tried to push an invalid project configuration %s for project %s",
                self._user.loggable_name,
                context.commit.id,
                context.project,
                exc_info=True,
            )
            return Rejection(reason=INVALID_CONFIG_MSG, messages=messages)

        if cfg.validation_errors:
            messages.append(ValidationMessage.error("Invalid project configuration:"))
            for err in cfg.validation_errors:
                messages.append(ValidationMessage.error(f"  {err}"))
            return Rejection(reason=INVALID_CONFIG_MSG, messages=messages)

        if (
            context.project == self._all_users
            and cfg.get_parent(self._all_projects) != self._all_projects
        ):
            messages.append(ValidationMessage.error("Invalid project configuration:"))
            messages.append(
                ValidationMessage.error(
                    f"  {self._all_users} must inherit from {self._all_projects}"
                )
            )
            return Rejection(reason=INVALID_CONFIG_MSG, messages=messages)

        return ValidationInfo.passed()
