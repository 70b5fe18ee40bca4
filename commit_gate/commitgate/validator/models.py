"""Validation outcome models."""

from __future__ import annotations

from enum import Enum
from typing import Mapping, Union

from pydantic import BaseModel, ConfigDict


class MessageType(str, Enum):
    """Severity of a message shown to the pushing user."""

    fatal = "fatal"
    error = "error"
    warning = "warning"
    hint = "hint"
    other = "other"


class ValidationMessage(BaseModel):
    """A single diagnostic line (or block) sent back to the client."""

    model_config = ConfigDict(frozen=True)

    message: str
    type: MessageType = MessageType.other

    @classmethod
    def error(cls, message: str) -> ValidationMessage:
        return cls(message=message, type=MessageType.error)


class ValidationStatus(str, Enum):
    passed = "passed"
    skipped_by_user = "skipped_by_user"
    not_applicable = "not_applicable"


class ValidationInfo(BaseModel):
    """Successful outcome of one validator."""

    model_config = ConfigDict(frozen=True)

    status: ValidationStatus = ValidationStatus.passed
    messages: tuple[ValidationMessage, ...] = ()
    # Sorted (key, value) pairs
    metadata: tuple[tuple[str, str], ...] = ()

    @classmethod
    def passed(cls, messages: list[ValidationMessage] | None = None) -> ValidationInfo:
        return cls(messages=tuple(messages or ()))

    @classmethod
    def skipped_by_user(cls, metadata: Mapping[str, str] | None = None) -> ValidationInfo:
        return cls(
            status=ValidationStatus.skipped_by_user,
            metadata=tuple(sorted((metadata or {}).items())),
        )

    @classmethod
    def not_applicable(cls) -> ValidationInfo:
        return cls(status=ValidationStatus.not_applicable)


class RejectionKind(str, Enum):
    policy = "policy"  # user-actionable rule failure
    internal = "internal"  # a collaborator failed


class Rejection(BaseModel):
    """Failed outcome of one validator; always ends the run."""

    model_config = ConfigDict(frozen=True)

    reason: str
    messages: tuple[ValidationMessage, ...] = ()
    kind: RejectionKind = RejectionKind.policy

    @classmethod
    def internal(cls, reason: str) -> Rejection:
        return cls(reason=reason, kind=RejectionKind.internal)


Outcome = Union[ValidationInfo, Rejection]
