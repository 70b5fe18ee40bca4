"""Abstract interfaces for the services the pipeline depends on.

The pipeline never evaluates permissions, reads repositories or exports
metrics itself; the hosting server supplies implementations of these.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from commitgate.context.models import ProjectState
from commitgate.errors import AuthError

if TYPE_CHECKING:
    from commitgate.backends.project_config import ProjectConfig
    from commitgate.context.models import ValidationContext


class RefPermission(str, Enum):
    """Fine-grained permissions on a single ref."""

    MERGE = "merge"
    FORGE_AUTHOR = "forge_author"
    FORGE_COMMITTER = "forge_committer"
    FORGE_SERVER = "forge_server"


class RefPermissions(ABC):
    """Permissions of the acting user on one ref."""

    @abstractmethod
    def test(self, permission: RefPermission) -> bool:
        """Return whether *permission* is granted.

        Raises ``PermissionBackendError`` if the backend cannot decide.
        """
        ...

    def check(self, permission: RefPermission) -> None:
        """Raise ``AuthError`` unless *permission* is granted."""
        if not self.test(permission):
            raise AuthError(f"{permission.name} not permitted")


class ProjectPermissions(ABC):
    """Permissions of the acting user within one project."""

    @abstractmethod
    def ref(self, ref_name: str) -> RefPermissions:
        ...


class ProjectCache(ABC):
    @abstractmethod
    def get(self, project: str) -> ProjectState | None:
        """Return the state of *project*, or None if it does not exist."""
        ...


class ProjectConfigLoader(ABC):
    @abstractmethod
    def load(self, project: str, revision: str) -> ProjectConfig:
        """Load the project configuration stored at *revision*.

        Raises ``ConfigInvalidError`` for unparseable content and
        ``OSError`` when the revision cannot be read.
        """
        ...


class ModifiedFile(BaseModel):
    """One entry of a commit's diff."""

    old_path: str | None = None
    new_path: str | None = None


class DiffProvider(ABC):
    @abstractmethod
    def changed_paths(self, context: ValidationContext) -> list[ModifiedFile]:
        """Return the files modified by the commit.

        Merge commits are compared against their auto-merge. Raises
        ``DiffNotAvailableError`` when no diff can be computed.
        """
        ...


class MetricsSink(ABC):
    @abstractmethod
    def increment(self, name: str, *fields: object) -> None:
        ...


class BannedCommits(ABC):
    @abstractmethod
    def contains(self, commit_id: str) -> bool:
        """Return whether *commit_id* is banned. May raise ``OSError``."""
        ...


class UrlFormatter(ABC):
    @abstractmethod
    def web_url(self) -> str | None:
        """Canonical web URL of the server, with a trailing slash."""
        ...

    @abstractmethod
    def settings_url(self, section: str = "") -> str | None:
        ...


class CopyConditionParser(ABC):
    @abstractmethod
    def parse(self, condition: str) -> None:
        """Raise ``QueryParseError`` if *condition* is not a valid query."""
        ...


class HostKey(BaseModel):
    """An SSH host key entry; ``host`` is ``name``, ``name:port`` or ``*:port``."""

    model_config = ConfigDict(frozen=True)

    host: str


class SshInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    host_keys: tuple[HostKey, ...] = ()
