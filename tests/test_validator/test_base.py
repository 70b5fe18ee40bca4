"""Tests for the validator interface and the plugin wrappers."""

from __future__ import annotations

from commitgate.validator.base import CommitValidator, PluginValidator, SkippableValidator
from commitgate.validator.models import (
    Rejection,
    RejectionKind,
    ValidationInfo,
    ValidationStatus,
)

from fakes import CrashingValidator, RecordingValidator, make_context


class _Unnamed(CommitValidator):
    def validate_commit(self, context):
        return ValidationInfo.passed()


class TestValidatorName:
    def test_explicit_name(self) -> None:
        assert RecordingValidator("plugin").validator_name == "plugin"

    def test_falls_back_to_class_name(self) -> None:
        assert _Unnamed().validator_name == "_Unnamed"


class TestPluginValidator:
    def test_delegates(self) -> None:
        inner = RecordingValidator("plugin", Rejection(reason="no"))
        assert PluginValidator(inner).validate_commit(make_context()) == Rejection(reason="no")
        assert inner.calls == 1

    def test_crash_becomes_internal_rejection(self) -> None:
        outcome = PluginValidator(CrashingValidator("plugin")).validate_commit(make_context())
        assert isinstance(outcome, Rejection)
        assert outcome.kind == RejectionKind.internal
        assert "plugin bug" not in outcome.reason

    def test_ignores_skip_request(self) -> None:
        inner = RecordingValidator("plugin")
        PluginValidator(inner).validate_commit(make_context(skip_validation=True))
        assert inner.calls == 1


class TestSkippableValidator:
    def test_delegates_without_skip(self) -> None:
        inner = RecordingValidator("plugin", Rejection(reason="no"))
        outcome = SkippableValidator(inner).validate_commit(make_context())
        assert outcome == Rejection(reason="no")
        assert inner.calls == 1

    def test_skipped_when_user_asks(self) -> None:
        inner = RecordingValidator("plugin", Rejection(reason="no"))
        outcome = SkippableValidator(inner).validate_commit(make_context(skip_validation=True))
        assert outcome.status == ValidationStatus.skipped_by_user
        assert inner.calls == 0

    def test_always_validate_ignores_skip(self) -> None:
        inner = RecordingValidator("plugin", always_validate=True)
        wrapper = SkippableValidator(inner)
        outcome = wrapper.validate_commit(make_context(skip_validation=True))
        assert outcome == ValidationInfo.passed()
        assert inner.calls == 1
        assert wrapper.always_validate

    def test_keeps_wrapped_name(self) -> None:
        assert SkippableValidator(RecordingValidator("plugin")).validator_name == "plugin"

    def test_crash_when_not_skipped(self) -> None:
        outcome = SkippableValidator(CrashingValidator("plugin")).validate_commit(make_context())
        assert isinstance(outcome, Rejection)
        assert outcome.kind == RejectionKind.internal

    def test_skipped_metadata_is_sorted_pairs(self) -> None:
        info = ValidationInfo.skipped_by_user({"b": "2", "a": "1"})
        assert info.metadata == (("a", "1"), ("b", "2"))
