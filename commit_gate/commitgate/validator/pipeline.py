"""Validation pipeline: runs an ordered validator list against one commit."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Callable, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from commitgate.context.models import ValidationContext
from commitgate.errors import CommitValidationError
from commitgate.tracing import trace_timer
from commitgate.validator.base import CommitValidator
from commitgate.validator.models import Rejection, ValidationInfo, ValidationMessage

logger = logging.getLogger(__name__)

ValidationResults = Mapping[str, ValidationInfo]

# Called once after a commit passed every validator
CommitValidationObserver = Callable[
    [ValidationResults, ValidationContext, Optional[str]], None
]


class ValidationRun(BaseModel):
    """Per-call options for one pipeline run.

    ``patch_set_id`` identifies the patch set under validation when one
    exists already. With ``invoke_observers`` off, the caller is responsible
    for notifying observers later, e.g. once the patch set is created.
    """

    model_config = ConfigDict(frozen=True)

    patch_set_id: str | None = None
    invoke_observers: bool = True


class CommitValidators:
    """An ordered list of validators for a push to one branch of one project."""

    def __init__(
        self,
        validators: list[CommitValidator],
        observers: list[CommitValidationObserver] | None = None,
    ) -> None:
        seen: set[str] = set()
        for validator in validators:
            if validator.validator_name in seen:
                raise ValueError(f"duplicate validator name: {validator.validator_name}")
            seen.add(validator.validator_name)
        self._validators = tuple(validators)
        self._observers = tuple(observers or ())

    @property
    def validators(self) -> tuple[CommitValidator, ...]:
        return self._validators

    @property
    def validator_names(self) -> list[str]:
        return [v.validator_name for v in self._validators]

    def validate(
        self,
        context: ValidationContext,
        run: ValidationRun | None = None,
    ) -> ValidationResults:
        """Run every validator in order and return their results by name.

        Stops at the first rejection and raises CommitValidationError
        carrying the messages of all validators that passed before it,
        followed by the rejection's own messages.
        """
        run = run or ValidationRun()
        commit_id = context.commit.id
        results: dict[str, ValidationInfo] = {}

        for validator in self._validators:
            name = validator.validator_name
            with trace_timer(
                "Running commit validator",
                validator=name,
                project=context.project,
                branch=context.branch,
                commit=commit_id,
            ):
                outcome = validator.validate_commit(context)

            if isinstance(outcome, Rejection):
                messages = _flatten_messages(results) + list(outcome.messages)
                logger.debug(
                    "commit %s was rejected by validator %s: %s",
                    commit_id,
                    name,
                    outcome.reason,
                )
                raise CommitValidationError(outcome.reason, messages, outcome.kind)

            logger.debug(
                "commit %s has passed validator %s: %s", commit_id, name, outcome.status.value,
            )
            results[name] = outcome

        frozen = MappingProxyType(results)
        if run.invoke_observers:
            self.notify_observers(frozen, context, run.patch_set_id)
        return frozen

    def notify_observers(
        self,
        results: ValidationResults,
        context: ValidationContext,
        patch_set_id: str | None = None,
    ) -> None:
        """Invoke every observer once, in registration order.

        Observer failures are logged and otherwise ignored; they never
        affect an accepted commit.
        """
        for observer in self._observers:
            try:
                observer(results, context, patch_set_id)
            except Exception:
                logger.exception(
                    "Commit validation observer failed for commit %s", context.commit.id
                )


def _flatten_messages(results: ValidationResults) -> list[ValidationMessage]:
    messages: list[ValidationMessage] = []
    for info in results.values():
        messages.extend(info.messages)
    return messages
