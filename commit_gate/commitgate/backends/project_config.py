"""Project configuration model and a YAML-backed loader.

Reading a revision out of the repository is left to the caller-supplied
``read_file`` callable; this module only parses and checks the structure
of ``project.yaml``:

.. code-block:: yaml

    project:
      parent: All-Projects
    labels:
      Code-Review:
        copyCondition: "changekind:NO_CHANGE OR is:MIN"
"""

from __future__ import annotations

import logging
from io import StringIO
from typing import Any, Callable

from pydantic import BaseModel, Field
from ruamel.yaml import YAML, YAMLError

from commitgate.backends.base import ProjectConfigLoader
from commitgate.errors import ConfigInvalidError

logger = logging.getLogger(__name__)

PROJECT_CONFIG_FILE = "project.yaml"

KNOWN_SECTIONS = {"project", "labels", "access", "plugins"}

# Label flags superseded by copyCondition
DEPRECATED_COPY_FLAGS = (
    "copyAnyScore",
    "copyMinScore",
    "copyMaxScore",
    "copyAllScoresIfNoChange",
    "copyAllScoresIfNoCodeChange",
    "copyAllScoresOnMergeFirstParentUpdate",
    "copyAllScoresOnTrivialRebase",
    "copyAllScoresIfListOfFilesDidNotChange",
    "copyValue",
)


class LabelDefinition(BaseModel):
    name: str
    copy_condition: str | None = None
    # Deprecated flag name -> configured value, only for flags present
    copy_flags: dict[str, Any] = Field(default_factory=dict)


class ProjectConfig(BaseModel):
    """Parsed project configuration plus any structural errors found."""

    project: str = ""
    parent: str | None = None
    labels: dict[str, LabelDefinition] = Field(default_factory=dict)
    validation_errors: list[str] = Field(default_factory=list)

    def get_parent(self, default: str) -> str:
        """Return the declared parent, or *default* when none is set."""
        return self.parent or default


def parse_project_config(project: str, text: str | None) -> ProjectConfig:
    """Parse ``project.yaml`` content into a ProjectConfig.

    Raises ConfigInvalidError when the YAML itself is malformed. Structural
    problems (unknown sections, wrong types) are collected in
    ``validation_errors`` instead.
    """
    config = ProjectConfig(project=project)
    if text is None or not text.strip():
        return config

    yaml = YAML(typ="safe")
    try:
        parsed = yaml.load(StringIO(text))
    except YAMLError as e:
        raise ConfigInvalidError(f"Invalid {PROJECT_CONFIG_FILE}: {e}") from e

    if parsed is None:
        return config
    if not isinstance(parsed, dict):
        config.validation_errors.append(
            f"{PROJECT_CONFIG_FILE}: top level must be a mapping"
        )
        return config

    for section in parsed:
        if section not in KNOWN_SECTIONS:
            config.validation_errors.append(
                f"{PROJECT_CONFIG_FILE}: unknown section '{section}'"
            )

    _parse_project_section(parsed.get("project"), config)
    _parse_labels_section(parsed.get("labels"), config)
    return config


def _parse_project_section(section: Any, config: ProjectConfig) -> None:
    if section is None:
        return
    if not isinstance(section, dict):
        config.validation_errors.append(
            f"{PROJECT_CONFIG_FILE}: 'project' must be a mapping"
        )
        return
    parent = section.get("parent")
    if parent is None:
        return
    if not isinstance(parent, str) or not parent.strip():
        config.validation_errors.append(
            f"{PROJECT_CONFIG_FILE}: project.parent must be a project name"
        )
        return
    config.parent = parent.strip()


def _parse_labels_section(section: Any, config: ProjectConfig) -> None:
    if section is None:
        return
    if not isinstance(section, dict):
        config.validation_errors.append(
            f"{PROJECT_CONFIG_FILE}: 'labels' must be a mapping"
        )
        return

    for name, body in section.items():
        name = str(name)
        if body is None:
            body = {}
        if not isinstance(body, dict):
            config.validation_errors.append(
                f"{PROJECT_CONFIG_FILE}: label '{name}' must be a mapping"
            )
            continue

        label = LabelDefinition(name=name)
        condition = body.get("copyCondition")
        if condition is not None:
            if isinstance(condition, str):
                label.copy_condition = condition
            else:
                config.validation_errors.append(
                    f"{PROJECT_CONFIG_FILE}: label.{name}.copyCondition must be a string"
                )
        for flag in DEPRECATED_COPY_FLAGS:
            if flag in body:
                label.copy_flags[flag] = body[flag]
        config.labels[name] = label


class YamlProjectConfigLoader(ProjectConfigLoader):
    """Loads ``project.yaml`` from a revision through *read_file*.

    ``read_file(project, revision, path)`` returns the file content, None if
    the file does not exist at that revision, and raises OSError when the
    revision cannot be read.
    """

    def __init__(self, read_file: Callable[[str, str, str], str | None]) -> None:
        self._read_file = read_file

    def load(self, project: str, revision: str) -> ProjectConfig:
        text = self._read_file(project, revision, PROJECT_CONFIG_FILE)
        config = parse_project_config(project, text)
        logger.debug(
            "Loaded %s for %s at %s (%d errors)",
            PROJECT_CONFIG_FILE,
            project,
            revision,
            len(config.validation_errors),
        )
        return config
