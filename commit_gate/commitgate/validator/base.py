"""Validator interface and the wrappers put around plugin validators."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from commitgate.context.models import ValidationContext
from commitgate.validator.models import Outcome, Rejection, ValidationInfo

logger = logging.getLogger(__name__)

PLUGIN_FAILURE_MSG = "internal error in commit validation"


class CommitValidator(ABC):
    """One policy check run against an incoming commit.

    Implementations return an ``Outcome`` instead of raising; collaborator
    failures must be turned into a ``Rejection`` before leaving
    ``validate_commit``.
    """

    #: Key in the aggregated result map and in log output.
    name: str = ""

    #: Run even when the user asked to skip validation.
    always_validate: bool = False

    @property
    def validator_name(self) -> str:
        return self.name or type(self).__name__

    @abstractmethod
    def validate_commit(self, context: ValidationContext) -> Outcome:
        ...


class PluginValidator(CommitValidator):
    """Wraps a plugin validator so that anything it raises becomes an
    internal rejection instead of escaping the pipeline.
    """

    def __init__(self, wrapped: CommitValidator) -> None:
        self._wrapped = wrapped
        self.always_validate = wrapped.always_validate

    @property
    def validator_name(self) -> str:
        return self._wrapped.validator_name

    @property
    def wrapped(self) -> CommitValidator:
        return self._wrapped

    def validate_commit(self, context: ValidationContext) -> Outcome:
        try:
            return self._wrapped.validate_commit(context)
        except Exception:
            logger.exception(
                "Commit validator %s failed on commit %s in project %s",
                self.validator_name,
                context.commit.id,
                context.project,
            )
            return Rejection.internal(PLUGIN_FAILURE_MSG)


class SkippableValidator(PluginValidator):
    """Plugin wrapper that users can bypass with skip-validation."""

    def validate_commit(self, context: ValidationContext) -> Outcome:
        if context.skip_validation and not self._wrapped.always_validate:
            return ValidationInfo.skipped_by_user()
        return super().validate_commit(context)
