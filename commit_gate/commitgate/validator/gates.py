"""Simple accept/reject gates."""

from __future__ import annotations

import logging

from commitgate.backends.base import BannedCommits
from commitgate.context.models import ProjectState, ValidationContext
from commitgate.refs import is_group_ref, is_magic_branch
from commitgate.validator.base import CommitValidator
from commitgate.validator.models import Outcome, Rejection, ValidationInfo

logger = logging.getLogger(__name__)


class BannedCommitsValidator(CommitValidator):
    """Reject banned commits."""

    name = "banned_commits"

    def __init__(self, banned_commits: BannedCommits) -> None:
        self._banned_commits = banned_commits

    def validate_commit(self, context: ValidationContext) -> Outcome:
        commit_id = context.commit.id
        try:
            banned = self._banned_commits.contains(commit_id)
        except OSError:
            logger.error("Failed to read banned commits for %s", context.project, exc_info=True)
            return Rejection.internal("error checking banned commits")
        if banned:
            return Rejection(reason=f"contains banned commit {commit_id}")
        return ValidationInfo.passed()


class ProjectStateValidator(CommitValidator):
    """Reject updates to projects that don't allow writes."""

    name = "project_state"

    def __init__(self, project_state: ProjectState) -> None:
        self._project_state = project_state

    def validate_commit(self, context: ValidationContext) -> Outcome:
        if self._project_state.state_permits_write():
            return ValidationInfo.passed()
        return Rejection(reason="project state does not permit write")


class GroupCommitValidator(CommitValidator):
    """Reject direct updates to group branches."""

    name = "group_commit"

    def __init__(self, all_users: str) -> None:
        self._all_users = all_users

    def validate_commit(self, context: ValidationContext) -> Outcome:
        # Groups are stored inside the all-users project
        if context.project != self._all_users:
            return ValidationInfo.not_applicable()

        if is_magic_branch(context.ref_name):
            # Checked at submit time instead
            return ValidationInfo.passed()

        if is_group_ref(context.ref_name):
            return Rejection(reason="group update not allowed")
        return ValidationInfo.passed()
