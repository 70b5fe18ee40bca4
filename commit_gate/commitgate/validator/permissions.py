"""Permission-gated validators.

Each validator checks one fact about the commit against the pushing user
and, on mismatch, falls back to a fine-grained permission. A missing
permission is a policy rejection; a permission backend failure is an
internal one.
"""

from __future__ import annotations

import logging
from abc import abstractmethod

from commitgate.backends.base import RefPermission, RefPermissions, UrlFormatter
from commitgate.context.footers import SIGNED_OFF_BY
from commitgate.context.models import AccountUser, PersonIdent, ProjectState, ValidationContext
from commitgate.errors import AuthError, PermissionBackendError
from commitgate.validator.base import CommitValidator
from commitgate.validator.models import Outcome, Rejection, ValidationInfo, ValidationMessage

logger = logging.getLogger(__name__)

INTERNAL_AUTH_ERROR = "internal auth error"


def _internal_auth_error(permission: RefPermission) -> Rejection:
    logger.error("cannot check %s", permission.name, exc_info=True)
    return Rejection.internal(INTERNAL_AUTH_ERROR)


def invalid_email(
    kind: str,
    who: PersonIdent,
    user: AccountUser,
    url_formatter: UrlFormatter,
) -> ValidationMessage:
    """Explain that *who* is not one of the user's registered addresses."""
    lines = [
        f"email address {who.email} is not registered in your account, "
        f"and you lack 'forge {kind}' permission.\n"
    ]

    if not user.emails:
        lines.append("You have not registered any email addresses.\n")
    else:
        lines.append("The following addresses are currently registered:\n")
        for address in sorted(user.emails):
            lines.append(f"   {address}\n")

    if url_formatter.settings_url("") is not None:
        lines.append("To register an email address, visit:\n")
        lines.append(f"{url_formatter.settings_url('EmailAddresses')}\n\n")

    return ValidationMessage.error("".join(lines))


class UploadMergesPermissionValidator(CommitValidator):
    """Require permission to upload merge commits."""

    name = "upload_merges_permission"

    def __init__(self, perm: RefPermissions) -> None:
        self._perm = perm

    def validate_commit(self, context: ValidationContext) -> Outcome:
        if context.commit.parent_count <= 1:
            return ValidationInfo.passed()
        try:
            if self._perm.test(RefPermission.MERGE):
                return ValidationInfo.passed()
        except PermissionBackendError:
            return _internal_auth_error(RefPermission.MERGE)
        return Rejection(reason="you are not allowed to upload merges")


class _UploaderValidator(CommitValidator):
    """Require that an identity of the commit belongs to the uploader."""

    kind = ""
    permission = RefPermission.FORGE_AUTHOR

    def __init__(
        self,
        user: AccountUser,
        perm: RefPermissions,
        url_formatter: UrlFormatter,
    ) -> None:
        self._user = user
        self._perm = perm
        self._url_formatter = url_formatter

    @abstractmethod
    def _ident(self, context: ValidationContext) -> PersonIdent:
        ...

    def validate_commit(self, context: ValidationContext) -> Outcome:
        who = self._ident(context)
        if self._user.has_email_address(who.email):
            return ValidationInfo.passed()
        try:
            if self._perm.test(self.permission):
                return ValidationInfo.passed()
        except PermissionBackendError:
            return _internal_auth_error(self.permission)
        return Rejection(
            reason=f"invalid {self.kind}",
            messages=[invalid_email(self.kind, who, self._user, self._url_formatter)],
        )


class AuthorUploaderValidator(_UploaderValidator):
    """Require that the author matches the uploader."""

    name = "author_uploader"
    kind = "author"
    permission = RefPermission.FORGE_AUTHOR

    def _ident(self, context: ValidationContext) -> PersonIdent:
        return context.commit.author


class CommitterUploaderValidator(_UploaderValidator):
    """Require that the committer matches the uploader."""

    name = "committer_uploader"
    kind = "committer"
    permission = RefPermission.FORGE_COMMITTER

    def _ident(self, context: ValidationContext) -> PersonIdent:
        return context.commit.committer


class SignedOffByValidator(CommitValidator):
    """Require a Signed-off-by footer when the project asks for one."""

    name = "signed_off_by"

    def __init__(
        self,
        user: AccountUser,
        perm: RefPermissions,
        project_state: ProjectState,
    ) -> None:
        self._user = user
        self._perm = perm
        self._project_state = project_state

    def validate_commit(self, context: ValidationContext) -> Outcome:
        if not self._project_state.use_signed_off_by:
            return ValidationInfo.not_applicable()

        commit = context.commit
        signed_off = False
        for footer in commit.footer_lines():
            if not footer.matches(SIGNED_OFF_BY):
                continue
            email = footer.email_address()
            if email is None:
                continue
            if (
                email == commit.author.email
                or email == commit.committer.email
                or self._user.has_email_address(email)
            ):
                signed_off = True
                break

        if signed_off:
            return ValidationInfo.passed()
        try:
            if self._perm.test(RefPermission.FORGE_COMMITTER):
                return ValidationInfo.passed()
        except PermissionBackendError:
            return _internal_auth_error(RefPermission.FORGE_COMMITTER)
        return Rejection(reason="not Signed-off-by author/committer/uploader in message footer")


class AmendedServerMergeValidator(CommitValidator):
    """Stop users from amending merge commits the server created itself."""

    name = "amended_server_merge"

    def __init__(self, perm: RefPermissions, server_ident: PersonIdent) -> None:
        self._perm = perm
        self._server_ident = server_ident

    def validate_commit(self, context: ValidationContext) -> Outcome:
        commit = context.commit
        if commit.parent_count <= 1 or not commit.author.same_as(self._server_ident):
            return ValidationInfo.passed()
        try:
            self._perm.check(RefPermission.FORGE_SERVER)
        except AuthError:
            return Rejection(
                reason=(
                    f"pushing merge commit {commit.id} by {self._server_ident.email} "
                    f"requires '{RefPermission.FORGE_SERVER.name}' permission"
                )
            )
        except PermissionBackendError:
            return _internal_auth_error(RefPermission.FORGE_SERVER)
        return ValidationInfo.passed()
