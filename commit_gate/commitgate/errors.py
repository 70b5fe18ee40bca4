"""Exception taxonomy shared by the pipeline and its collaborators."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from commitgate.validator.models import RejectionKind, ValidationMessage


class CommitGateError(Exception):
    """Base class for all commit gate errors."""


class CommitValidationError(CommitGateError):
    """Raised by the pipeline when a validator rejects the commit.

    ``messages`` holds every diagnostic collected during the run, in
    execution order, ending with the rejecting validator's own messages.
    """

    def __init__(
        self,
        reason: str,
        messages: list[ValidationMessage] | None = None,
        kind: RejectionKind | None = None,
    ) -> None:
        super().__init__(reason)
        self.reason = reason
        self.messages = list(messages or [])
        self.kind = kind


class ProjectNotFoundError(CommitGateError):
    """The target project is unknown to the project cache."""

    def __init__(self, project: str) -> None:
        super().__init__(f"project '{project}' not found")
        self.project = project


# -- Collaborator errors --


class PermissionBackendError(CommitGateError):
    """The permission backend failed to evaluate a permission."""


class AuthError(CommitGateError):
    """A required permission was denied."""


class DiffNotAvailableError(CommitGateError):
    """The changed-path list could not be computed for a commit."""


class ConfigInvalidError(CommitGateError):
    """Project configuration could not be parsed."""


class QueryParseError(CommitGateError):
    """A query expression (e.g. a label copy condition) is malformed."""
