"""Tests for the factory entrypoint and log-based tracing."""

from __future__ import annotations

import logging

import pytest

from commitgate.backends.base import SshInfo
from commitgate.context.models import ProjectState
from commitgate.main import create_validator_factory
from commitgate.settings import GateSettings
from commitgate.tracing import trace_timer

from fakes import (
    FakeConfigLoader,
    FakeCopyConditionParser,
    FakeProjectCache,
    FakeProjectPermissions,
    RecordingMetrics,
    RecordingValidator,
    make_user,
)


class TestCreateValidatorFactory:
    def test_uses_given_settings(self, caplog: pytest.LogCaptureFixture) -> None:
        plugin = RecordingValidator("plugin")
        with caplog.at_level(logging.INFO, logger="commitgate.main"):
            factory = create_validator_factory(
                FakeProjectCache(ProjectState(name="platform/tools")),
                FakeConfigLoader(),
                RecordingMetrics(),
                FakeCopyConditionParser(),
                plugin_validators=[plugin],
                settings=GateSettings(canonical_web_url="https://review.example.com"),
            )

        pipeline = factory.for_server_commits(
            FakeProjectPermissions(), "platform/tools", "refs/heads/main", make_user(), SshInfo(),
        )
        assert "plugin" in pipeline.validator_names
        assert "Registered 1 plugin validator(s): plugin" in caplog.text

    def test_loads_settings_when_not_given(
        self, tmp_path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("all_users: Users\n", encoding="utf-8")
        monkeypatch.setenv("COMMITGATE_SETTINGS_PATH", str(path))

        factory = create_validator_factory(
            FakeProjectCache(), FakeConfigLoader(), RecordingMetrics(), FakeCopyConditionParser(),
        )
        assert factory.settings.all_users == "Users"


class TestTraceTimer:
    def test_logs_duration_with_tags(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="commitgate.tracing"):
            with trace_timer("Running commit validator", validator="change_id"):
                pass
        assert "Running commit validator (validator=change_id) took" in caplog.text

    def test_logs_even_when_block_raises(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="commitgate.tracing"):
            with pytest.raises(RuntimeError):
                with trace_timer("failing"):
                    raise RuntimeError("boom")
        assert "failing () took" in caplog.text

    def test_tags_not_formatted_without_debug(self, caplog: pytest.LogCaptureFixture) -> None:
        formatted = []

        class Tag:
            def __str__(self) -> str:
                formatted.append(True)
                return "tag"

        with caplog.at_level(logging.INFO, logger="commitgate.tracing"):
            with trace_timer("quiet", tag=Tag()):
                pass
        assert formatted == []
        assert "quiet" not in caplog.text
