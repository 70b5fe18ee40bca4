"""Assembles the validator list for each push scenario."""

from __future__ import annotations

import logging

from commitgate.backends.base import (
    BannedCommits,
    CopyConditionParser,
    MetricsSink,
    ProjectCache,
    ProjectConfigLoader,
    ProjectPermissions,
    SshInfo,
    UrlFormatter,
)
from commitgate.context.models import AccountUser, ProjectState
from commitgate.errors import ProjectNotFoundError
from commitgate.settings import GateSettings
from commitgate.validator.base import CommitValidator, PluginValidator, SkippableValidator
from commitgate.validator.change_id import ChangeIdValidator
from commitgate.validator.file_count import FileCountValidator
from commitgate.validator.gates import (
    BannedCommitsValidator,
    GroupCommitValidator,
    ProjectStateValidator,
)
from commitgate.validator.label_config import LabelConfigValidator
from commitgate.validator.permissions import (
    AmendedServerMergeValidator,
    AuthorUploaderValidator,
    CommitterUploaderValidator,
    SignedOffByValidator,
    UploadMergesPermissionValidator,
)
from commitgate.validator.pipeline import CommitValidationObserver, CommitValidators
from commitgate.validator.project_config import ConfigValidator

logger = logging.getLogger(__name__)


class ValidatorFactory:
    """Builds a fresh CommitValidators for every push.

    Server-wide collaborators are injected once; branch, user and project
    dependent validators are rebuilt on every call.
    """

    def __init__(
        self,
        settings: GateSettings,
        url_formatter: UrlFormatter,
        project_cache: ProjectCache,
        config_loader: ProjectConfigLoader,
        metrics: MetricsSink,
        copy_condition_parser: CopyConditionParser,
        plugin_validators: list[CommitValidator] | None = None,
        observers: list[CommitValidationObserver] | None = None,
    ) -> None:
        self._settings = settings
        self._url_formatter = url_formatter
        self._project_cache = project_cache
        self._config_loader = config_loader
        self._metrics = metrics
        self._copy_condition_parser = copy_condition_parser
        self._plugin_validators = list(plugin_validators or [])
        self._observers = list(observers or [])

    @property
    def settings(self) -> GateSettings:
        return self._settings

    def for_receive_commits(
        self,
        permissions: ProjectPermissions,
        project: str,
        branch: str,
        user: AccountUser,
        ssh_info: SshInfo,
        banned_commits: BannedCommits,
    ) -> CommitValidators:
        """Validators for commits pushed by users.

        Plugin validators can be bypassed with the push's skip-validation
        option unless they declare ``always_validate``.
        """
        perm = permissions.ref(branch)
        project_state = self._project_state(project)
        validators: list[CommitValidator] = [
            UploadMergesPermissionValidator(perm),
            ProjectStateValidator(project_state),
            AmendedServerMergeValidator(perm, self._settings.server_ident),
            AuthorUploaderValidator(user, perm, self._url_formatter),
            self._file_count_validator(),
            CommitterUploaderValidator(user, perm, self._url_formatter),
            SignedOffByValidator(user, perm, project_state),
            self._change_id_validator(project_state, user, ssh_info),
            self._config_validator(user),
            BannedCommitsValidator(banned_commits),
        ]
        validators.extend(SkippableValidator(v) for v in self._plugin_validators)
        validators.extend(self._trailing_validators())
        return CommitValidators(validators, self._observers)

    def for_server_commits(
        self,
        permissions: ProjectPermissions,
        project: str,
        branch: str,
        user: AccountUser,
        ssh_info: SshInfo,
    ) -> CommitValidators:
        """Validators for commits the server creates on a user's behalf.

        Plugin validators always run; skip-validation does not apply.
        """
        perm = permissions.ref(branch)
        project_state = self._project_state(project)
        validators: list[CommitValidator] = [
            UploadMergesPermissionValidator(perm),
            ProjectStateValidator(project_state),
            AmendedServerMergeValidator(perm, self._settings.server_ident),
            AuthorUploaderValidator(user, perm, self._url_formatter),
            self._file_count_validator(),
            SignedOffByValidator(user, perm, project_state),
            self._change_id_validator(project_state, user, ssh_info),
            self._config_validator(user),
        ]
        validators.extend(PluginValidator(v) for v in self._plugin_validators)
        validators.extend(self._trailing_validators())
        return CommitValidators(validators, self._observers)

    def for_merged_commits(
        self,
        permissions: ProjectPermissions,
        project: str,
        branch: str,
        user: AccountUser,
    ) -> CommitValidators:
        """Validators for reviews created from already-merged commits.

        Only checks based on the uploader's permissions are included.
        Anything that would need the commit amended (Change-Id,
        Signed-off-by, bans, plugin message formats) cannot be fixed
        after the fact and is left out.
        """
        perm = permissions.ref(branch)
        project_state = self._project_state(project)
        validators: list[CommitValidator] = [
            UploadMergesPermissionValidator(perm),
            ProjectStateValidator(project_state),
            AuthorUploaderValidator(user, perm, self._url_formatter),
            CommitterUploaderValidator(user, perm, self._url_formatter),
        ]
        return CommitValidators(validators, self._observers)

    def _project_state(self, project: str) -> ProjectState:
        state = self._project_cache.get(project)
        if state is None:
            logger.error("Project %s missing from project cache", project)
            raise ProjectNotFoundError(project)
        return state

    def _file_count_validator(self) -> FileCountValidator:
        return FileCountValidator(
            self._url_formatter, self._metrics, self._settings.max_files,
        )

    def _change_id_validator(
        self, project_state: ProjectState, user: AccountUser, ssh_info: SshInfo,
    ) -> ChangeIdValidator:
        return ChangeIdValidator(
            project_state,
            user,
            self._url_formatter,
            ssh_info,
            self._settings.install_commit_msg_hook_command,
        )

    def _config_validator(self, user: AccountUser) -> ConfigValidator:
        return ConfigValidator(
            self._config_loader,
            user,
            self._settings.all_users,
            self._settings.all_projects,
        )

    def _trailing_validators(self) -> list[CommitValidator]:
        return [
            GroupCommitValidator(self._settings.all_users),
            LabelConfigValidator(self._config_loader, self._copy_condition_parser),
        ]
