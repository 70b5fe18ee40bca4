"""Change-Id footer validation for pushes that create or update a review."""

from __future__ import annotations

import re

from commitgate.backends.base import SshInfo, UrlFormatter
from commitgate.backends.urls import server_host
from commitgate.context.footers import CHANGE_ID, footer_values
from commitgate.context.models import AccountUser, ProjectState, ValidationContext
from commitgate.refs import is_magic_branch, is_new_patch_set_ref
from commitgate.validator.base import CommitValidator
from commitgate.validator.hook_hint import commit_msg_hook_hint
from commitgate.validator.models import Outcome, Rejection, ValidationInfo, ValidationMessage

CHANGE_ID_PREFIX = CHANGE_ID + ":"
CHANGE_ID_RE = re.compile(r"^I[0-9a-f]{40}$")
# Placeholder written by some clients before the real id is computed
PLACEHOLDER_CHANGE_ID_RE = re.compile(r"^I0+$")

MISSING_CHANGE_ID_MSG = "missing Change-Id in message footer"
MISSING_SUBJECT_MSG = "missing subject; Change-Id must be in message footer"
CHANGE_ID_ABOVE_FOOTER_MSG = "Change-Id must be in message footer"
MULTIPLE_CHANGE_ID_MSG = "multiple Change-Id lines in message footer"
INVALID_CHANGE_ID_MSG = "invalid Change-Id line format in message footer"
CHANGE_ID_MISMATCH_MSG = "Change-Id in message footer does not match Change-Id of target change"


def is_valid_change_id(value: str) -> bool:
    value = value.strip()
    return CHANGE_ID_RE.match(value) is not None and not PLACEHOLDER_CHANGE_ID_RE.match(value)


class ChangeIdValidator(CommitValidator):
    name = "change_id"

    def __init__(
        self,
        project_state: ProjectState,
        user: AccountUser,
        url_formatter: UrlFormatter,
        ssh_info: SshInfo,
        install_command: str | None = None,
    ) -> None:
        self._project_state = project_state
        self._user = user
        self._url_formatter = url_formatter
        self._ssh_info = ssh_info
        self._install_command = install_command

    def validate_commit(self, context: ValidationContext) -> Outcome:
        if not self._should_validate(context.ref_name):
            return ValidationInfo.not_applicable()

        commit = context.commit
        ids = footer_values(commit.footer_lines(), CHANGE_ID)

        if not ids:
            short_message = commit.short_message
            if short_message.startswith(CHANGE_ID_PREFIX) and CHANGE_ID_RE.match(
                short_message[len(CHANGE_ID_PREFIX):].strip()
            ):
                return Rejection(reason=MISSING_SUBJECT_MSG)
            if "\n" + CHANGE_ID_PREFIX in commit.message:
                return Rejection(
                    reason=CHANGE_ID_ABOVE_FOOTER_MSG,
                    messages=[
                        ValidationMessage.error(
                            f"{CHANGE_ID_ABOVE_FOOTER_MSG}\n"
                            "\n"
                            "Hint: run\n"
                            "  git commit --amend\n"
                            "and move 'Change-Id: Ixxx..' to the bottom on a separate line\n"
                        )
                    ],
                )
            if self._project_state.require_change_id:
                return Rejection(
                    reason=MISSING_CHANGE_ID_MSG,
                    messages=[self._missing_change_id_message(MISSING_CHANGE_ID_MSG)],
                )
            return ValidationInfo.passed()

        if len(ids) > 1:
            return Rejection(
                reason=MULTIPLE_CHANGE_ID_MSG,
                messages=[self._multiple_change_ids_message(ids)],
            )

        value = ids[0].strip()
        if not is_valid_change_id(value):
            return Rejection(
                reason=INVALID_CHANGE_ID_MSG,
                messages=[self._missing_change_id_message(INVALID_CHANGE_ID_MSG)],
            )
        if context.change is not None and value != context.change.key:
            return Rejection(reason=CHANGE_ID_MISMATCH_MSG)
        return ValidationInfo.passed()

    @staticmethod
    def _should_validate(ref_name: str) -> bool:
        return is_magic_branch(ref_name) or is_new_patch_set_ref(ref_name)

    def _missing_change_id_message(self, error: str) -> ValidationMessage:
        return ValidationMessage.error(
            f"{error}\n"
            "\nHint: to automatically insert a Change-Id, install the hook:\n"
            f"{self.installation_hint()}\n"
            "and then amend the commit:\n"
            "  git commit --amend --no-edit\n"
            "Finally, push your changes again\n"
        )

    @staticmethod
    def _multiple_change_ids_message(ids: list[str]) -> ValidationMessage:
        listing = "\n".join(
            f"* {id_} [{'VALID' if CHANGE_ID_RE.match(id_.strip()) else 'INVALID'}]"
            for id_ in ids
        )
        return ValidationMessage.error(
            f"{MULTIPLE_CHANGE_ID_MSG}\n\nHint: the following Change-Ids were found:\n{listing}\n"
        )

    def installation_hint(self) -> str:
        web_url = self._url_formatter.web_url() or f"http://{server_host(None)}/"
        return commit_msg_hook_hint(
            self._install_command,
            self._ssh_info.host_keys,
            web_url,
            self._user.username,
        )
