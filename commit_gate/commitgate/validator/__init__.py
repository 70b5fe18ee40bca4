"""Commit validators and the pipeline that runs them."""

from commitgate.validator.base import CommitValidator, PluginValidator, SkippableValidator
from commitgate.validator.factory import ValidatorFactory
from commitgate.validator.models import (
    MessageType,
    Outcome,
    Rejection,
    RejectionKind,
    ValidationInfo,
    ValidationMessage,
    ValidationStatus,
)
from commitgate.validator.pipeline import CommitValidators, ValidationRun

__all__ = [
    "CommitValidator",
    "CommitValidators",
    "MessageType",
    "Outcome",
    "PluginValidator",
    "Rejection",
    "RejectionKind",
    "SkippableValidator",
    "ValidationInfo",
    "ValidationMessage",
    "ValidationRun",
    "ValidationStatus",
    "ValidatorFactory",
]
