"""Tests for ValidatorFactory scenario assembly."""

from __future__ import annotations

import pytest

from commitgate.backends.base import SshInfo
from commitgate.backends.urls import CanonicalUrlFormatter
from commitgate.context.models import ProjectState
from commitgate.errors import CommitValidationError, ProjectNotFoundError
from commitgate.settings import GateSettings
from commitgate.validator.base import PluginValidator, SkippableValidator
from commitgate.validator.factory import ValidatorFactory
from commitgate.validator.models import RejectionKind, ValidationStatus

from fakes import (
    CrashingValidator,
    FakeBannedCommits,
    FakeConfigLoader,
    FakeCopyConditionParser,
    FakeDiffProvider,
    FakeProjectCache,
    FakeProjectPermissions,
    RecordingMetrics,
    RecordingValidator,
    make_context,
    make_user,
)

PROJECT = "platform/tools"
BRANCH = "refs/heads/main"

RECEIVE_BUILTINS_HEAD = [
    "upload_merges_permission",
    "project_state",
    "amended_server_merge",
    "author_uploader",
    "file_count",
    "committer_uploader",
    "signed_off_by",
    "change_id",
    "project_config",
    "banned_commits",
]
TRAILING = ["group_commit", "label_config"]


def _factory(plugins=None, observers=None, projects=None) -> ValidatorFactory:
    return ValidatorFactory(
        settings=GateSettings(canonical_web_url="https://review.example.com/"),
        url_formatter=CanonicalUrlFormatter("https://review.example.com/"),
        project_cache=FakeProjectCache(*(projects or [ProjectState(name=PROJECT)])),
        config_loader=FakeConfigLoader(),
        metrics=RecordingMetrics(),
        copy_condition_parser=FakeCopyConditionParser(),
        plugin_validators=plugins,
        observers=observers,
    )


def _receive(factory: ValidatorFactory):
    return factory.for_receive_commits(
        FakeProjectPermissions(), PROJECT, BRANCH, make_user(), SshInfo(), FakeBannedCommits(),
    )


class TestForReceiveCommits:
    def test_order_without_plugins(self) -> None:
        assert _receive(_factory()).validator_names == RECEIVE_BUILTINS_HEAD + TRAILING

    def test_plugins_between_bans_and_group_check(self) -> None:
        plugins = [RecordingValidator("plugin_a"), RecordingValidator("plugin_b")]
        pipeline = _receive(_factory(plugins))

        assert pipeline.validator_names == (
            RECEIVE_BUILTINS_HEAD + ["plugin_a", "plugin_b"] + TRAILING
        )
        wrapped = pipeline.validators[len(RECEIVE_BUILTINS_HEAD)]
        assert isinstance(wrapped, SkippableValidator)
        assert wrapped.wrapped is plugins[0]

    def test_permissions_scoped_to_branch(self) -> None:
        permissions = FakeProjectPermissions()
        _factory().for_receive_commits(
            permissions, PROJECT, BRANCH, make_user(), SshInfo(), FakeBannedCommits(),
        )
        assert permissions.refs == [BRANCH]

    def test_assembly_does_not_run_validators(self) -> None:
        plugin = RecordingValidator("plugin")
        _receive(_factory([plugin]))
        assert plugin.calls == 0

    def test_each_call_builds_fresh_pipeline(self) -> None:
        factory = _factory()
        first, second = _receive(factory), _receive(factory)
        assert first is not second
        assert first.validators[0] is not second.validators[0]

    def test_skip_validation_skips_plugins(self) -> None:
        plugin = RecordingValidator("plugin")
        pipeline = _receive(_factory([plugin]))
        context = make_context(skip_validation=True, diff_provider=FakeDiffProvider(["a.py"]))

        results = pipeline.validate(context)

        assert plugin.calls == 0
        assert results["plugin"].status == ValidationStatus.skipped_by_user

    def test_unknown_project(self) -> None:
        with pytest.raises(ProjectNotFoundError):
            _factory(projects=[ProjectState(name="other")]).for_receive_commits(
                FakeProjectPermissions(), PROJECT, BRANCH, make_user(), SshInfo(),
                FakeBannedCommits(),
            )


class TestForServerCommits:
    def test_order(self) -> None:
        pipeline = _factory([RecordingValidator("plugin")]).for_server_commits(
            FakeProjectPermissions(), PROJECT, BRANCH, make_user(), SshInfo(),
        )
        expected = [
            n for n in RECEIVE_BUILTINS_HEAD
            if n not in ("committer_uploader", "banned_commits")
        ]
        assert pipeline.validator_names == expected + ["plugin"] + TRAILING

    def test_plugins_not_skippable(self) -> None:
        plugin = RecordingValidator("plugin")
        pipeline = _factory([plugin]).for_server_commits(
            FakeProjectPermissions(), PROJECT, BRANCH, make_user(), SshInfo(),
        )
        assert not any(isinstance(v, SkippableValidator) for v in pipeline.validators)
        wrapped = pipeline.validators[-3]
        assert type(wrapped) is PluginValidator
        assert wrapped.wrapped is plugin

        pipeline.validate(
            make_context(skip_validation=True, diff_provider=FakeDiffProvider(["a.py"]))
        )
        assert plugin.calls == 1

    def test_crashing_plugin_rejected_as_internal(self) -> None:
        pipeline = _factory([CrashingValidator("plugin")]).for_server_commits(
            FakeProjectPermissions(), PROJECT, BRANCH, make_user(), SshInfo(),
        )
        with pytest.raises(CommitValidationError) as exc_info:
            pipeline.validate(make_context(diff_provider=FakeDiffProvider(["a.py"])))
        assert exc_info.value.kind == RejectionKind.internal


class TestForMergedCommits:
    def test_minimal_order(self) -> None:
        pipeline = _factory([RecordingValidator("plugin")]).for_merged_commits(
            FakeProjectPermissions(), PROJECT, BRANCH, make_user(),
        )
        assert pipeline.validator_names == [
            "upload_merges_permission",
            "project_state",
            "author_uploader",
            "committer_uploader",
        ]


class TestObserverWiring:
    def test_observers_passed_to_pipeline(self) -> None:
        seen = []
        pipeline = _factory(observers=[lambda r, c, p: seen.append(list(r))]).for_merged_commits(
            FakeProjectPermissions(), PROJECT, BRANCH, make_user(),
        )
        pipeline.validate(make_context())
        assert seen == [[
            "upload_merges_permission",
            "project_state",
            "author_uploader",
            "committer_uploader",
        ]]
