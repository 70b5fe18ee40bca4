"""Ref-name constants and predicates used by the validators."""

from __future__ import annotations

import re

REFS_CHANGES = "refs/changes/"
REFS_CONFIG = "refs/meta/config"
REFS_GROUPS = "refs/groups/"
NEW_CHANGE = "refs/for/"

# Pseudo-files added to every change by the diff layer, not real paths
COMMIT_MSG = "/COMMIT_MSG"
MERGE_LIST = "/MERGE_LIST"

NEW_PATCHSET_RE = re.compile(
    "^" + REFS_CHANGES + r"(?:[0-9][0-9]/)?([1-9][0-9]*)(?:/[1-9][0-9]*)?$"
)


def is_magic_branch(ref_name: str) -> bool:
    """True for refs that create or update a review (``refs/for/...``)."""
    return ref_name.startswith(NEW_CHANGE)


def is_new_patch_set_ref(ref_name: str) -> bool:
    """True for ``refs/changes/[XX/]N[/PS]`` style refs."""
    return NEW_PATCHSET_RE.match(ref_name) is not None


def is_group_ref(ref_name: str) -> bool:
    return ref_name.startswith(REFS_GROUPS)


def is_magic_path(path: str) -> bool:
    return path in (COMMIT_MSG, MERGE_LIST)
