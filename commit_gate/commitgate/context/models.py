"""Data models describing one incoming commit and who is pushing it."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from commitgate.context.footers import FooterLine, parse_footer_lines, split_paragraphs
from commitgate.errors import DiffNotAvailableError
from commitgate.refs import is_magic_path

if TYPE_CHECKING:
    from commitgate.backends.base import DiffProvider


class PersonIdent(BaseModel):
    """Author, committer or server identity."""

    model_config = ConfigDict(frozen=True)

    name: str
    email: str

    def same_as(self, other: PersonIdent) -> bool:
        return self.name == other.name and self.email == other.email


class CommitInfo(BaseModel):
    """The commit being validated."""

    model_config = ConfigDict(frozen=True)

    id: str
    parent_ids: tuple[str, ...] = ()
    author: PersonIdent
    committer: PersonIdent
    message: str = ""

    @property
    def parent_count(self) -> int:
        return len(self.parent_ids)

    @property
    def short_message(self) -> str:
        """First paragraph of the message collapsed onto one line."""
        paragraphs = split_paragraphs(self.message)
        if not paragraphs:
            return ""
        return " ".join(line.strip() for line in paragraphs[0])

    def footer_lines(self) -> list[FooterLine]:
        return parse_footer_lines(self.message)


class AccountUser(BaseModel):
    """The authenticated account performing the push."""

    model_config = ConfigDict(frozen=True)

    account_id: int
    username: str | None = None
    display_name: str = ""
    emails: frozenset[str] = frozenset()

    def has_email_address(self, email: str) -> bool:
        return email in self.emails

    @property
    def loggable_name(self) -> str:
        if self.username:
            return self.username
        return f"a/{self.account_id}"


class ChangeKey(BaseModel):
    """An existing review that the push adds a patch set to."""

    model_config = ConfigDict(frozen=True)

    number: int
    key: str


class ProjectLifecycle(str, Enum):
    active = "active"
    read_only = "read_only"
    hidden = "hidden"


class ProjectState(BaseModel):
    """Cached, already-parsed state of the target project."""

    model_config = ConfigDict(frozen=True)

    name: str
    state: ProjectLifecycle = ProjectLifecycle.active
    require_change_id: bool = True
    use_signed_off_by: bool = False

    def state_permits_write(self) -> bool:
        return self.state == ProjectLifecycle.active


@dataclass(frozen=True)
class ValidationContext:
    """Immutable snapshot handed to every validator of one pipeline run.

    ``branch`` is the destination branch (``refs/heads/main``) while
    ``ref_name`` is the ref the client pushed to (``refs/for/main``,
    ``refs/changes/45/12345/2`` or the branch itself for direct pushes).
    The commit, user and change models are frozen as well, so nothing
    reachable from the context can be changed by a validator.
    """

    project: str
    branch: str
    ref_name: str
    commit: CommitInfo
    user: AccountUser
    skip_validation: bool = False
    change: ChangeKey | None = None
    old_id: str | None = None
    diff_provider: DiffProvider | None = field(default=None, compare=False, repr=False)

    @cached_property
    def changed_file_count(self) -> int:
        """Number of changed paths, excluding the diff layer's pseudo-files.

        Computed on first access; raises ``DiffNotAvailableError`` when the
        diff cannot be produced (nothing is cached in that case).
        """
        if self.diff_provider is None:
            raise DiffNotAvailableError(f"no diff provider for commit {self.commit.id}")
        modified = self.diff_provider.changed_paths(self)
        return sum(1 for f in modified if not is_magic_path(f.new_path or ""))
