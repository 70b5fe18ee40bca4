"""Checks label definitions in pushed project configuration.

Deprecated copy flags may stay as they are in existing configs but may not
be newly set; ``copyCondition`` replaces them. Copy conditions have to
parse as approval queries.
"""

from __future__ import annotations

import logging

from commitgate.backends.base import CopyConditionParser, ProjectConfigLoader
from commitgate.backends.project_config import DEPRECATED_COPY_FLAGS, ProjectConfig
from commitgate.context.models import ValidationContext
from commitgate.errors import ConfigInvalidError, QueryParseError
from commitgate.refs import REFS_CONFIG
from commitgate.validator.base import CommitValidator
from commitgate.validator.models import Outcome, Rejection, ValidationInfo, ValidationMessage

logger = logging.getLogger(__name__)

INVALID_CONFIG_MSG = "invalid project configuration"

# Suggested copyCondition replacement per deprecated flag
FLAG_REPLACEMENTS = {
    "copyAnyScore": "is:ANY",
    "copyMinScore": "is:MIN",
    "copyMaxScore": "is:MAX",
    "copyAllScoresIfNoChange": "changekind:NO_CHANGE",
    "copyAllScoresIfNoCodeChange": "changekind:NO_CODE_CHANGE",
    "copyAllScoresOnMergeFirstParentUpdate": "changekind:MERGE_FIRST_PARENT_UPDATE",
    "copyAllScoresOnTrivialRebase": "changekind:TRIVIAL_REBASE",
    "copyAllScoresIfListOfFilesDidNotChange": "has:unchanged-files",
    "copyValue": "is:<value>",
}


class LabelConfigValidator(CommitValidator):
    name = "label_config"

    def __init__(
        self,
        config_loader: ProjectConfigLoader,
        copy_condition_parser: CopyConditionParser,
    ) -> None:
        self._config_loader = config_loader
        self._parser = copy_condition_parser

    def validate_commit(self, context: ValidationContext) -> Outcome:
        if context.branch != REFS_CONFIG:
            return ValidationInfo.not_applicable()

        try:
            new_cfg = self._config_loader.load(context.project, context.commit.id)
            old_cfg = (
                self._config_loader.load(context.project, context.old_id)
                if context.old_id
                else None
            )
        except (ConfigInvalidError, OSError):
            # Reported by the project config validator
            logger.debug(
                "Skipping label validation, config of %s at %s is unreadable",
                context.project,
                context.commit.id,
            )
            return ValidationInfo.passed()

        errors = self._deprecated_flag_errors(new_cfg, old_cfg)
        errors.extend(self._copy_condition_errors(new_cfg))
        if errors:
            return Rejection(
                reason=INVALID_CONFIG_MSG,
                messages=[ValidationMessage.error(e) for e in errors],
            )
        return ValidationInfo.passed()

    @staticmethod
    def _deprecated_flag_errors(
        new_cfg: ProjectConfig, old_cfg: ProjectConfig | None,
    ) -> list[str]:
        errors: list[str] = []
        for name, label in new_cfg.labels.items():
            old_label = old_cfg.labels.get(name) if old_cfg else None
            for flag in DEPRECATED_COPY_FLAGS:
                if flag not in label.copy_flags:
                    continue
                value = label.copy_flags[flag]
                if old_label is not None and old_label.copy_flags.get(flag) == value:
                    continue
                errors.append(
                    f"Parameter 'label.{name}.{flag}' is deprecated and cannot be set, "
                    f"use '{FLAG_REPLACEMENTS[flag]}' in 'label.{name}.copyCondition' instead."
                )
        return errors

    def _copy_condition_errors(self, cfg: ProjectConfig) -> list[str]:
        errors: list[str] = []
        for name, label in cfg.labels.items():
            if label.copy_condition is None:
                continue
            try:
                self._parser.parse(label.copy_condition)
            except QueryParseError as e:
                errors.append(
                    f"Cannot parse copyCondition '{label.copy_condition}' of label {name}: {e}"
                )
        return errors
