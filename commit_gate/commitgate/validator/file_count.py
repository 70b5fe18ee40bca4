"""Limits the number of files per change."""

from __future__ import annotations

import logging

from commitgate.backends.base import MetricsSink, UrlFormatter
from commitgate.backends.urls import server_host
from commitgate.context.models import ValidationContext
from commitgate.errors import DiffNotAvailableError
from commitgate.refs import NEW_CHANGE, REFS_CHANGES
from commitgate.settings import DEFAULT_MAX_FILES
from commitgate.validator.base import CommitValidator
from commitgate.validator.models import Outcome, Rejection, ValidationInfo

logger = logging.getLogger(__name__)

FILE_COUNT_WARNING_THRESHOLD = 10_000
FILE_COUNT_METRIC = "validation/file_count"


class FileCountValidator(CommitValidator):
    name = "file_count"

    def __init__(
        self,
        url_formatter: UrlFormatter,
        metrics: MetricsSink,
        max_file_count: int = DEFAULT_MAX_FILES,
    ) -> None:
        self._url_formatter = url_formatter
        self._metrics = metrics
        self._max_file_count = max_file_count

    def validate_commit(self, context: ValidationContext) -> Outcome:
        ref_name = context.ref_name
        if not ref_name.startswith(NEW_CHANGE) and not ref_name.startswith(REFS_CHANGES):
            # Direct push bypassing review, no limit to enforce
            return ValidationInfo.not_applicable()

        try:
            changed_files = context.changed_file_count
        except DiffNotAvailableError:
            # Expected for some comparison bases; only worth noting for change refs
            if ref_name.startswith(REFS_CHANGES):
                logger.warning(
                    "Failed to validate file count for commit: %s",
                    context.commit.id,
                    exc_info=True,
                )
            return ValidationInfo.passed()

        if changed_files > self._max_file_count:
            return Rejection(
                reason=(
                    "Exceeding maximum number of files per change "
                    f"({changed_files} > {self._max_file_count})"
                )
            )
        if changed_files > FILE_COUNT_WARNING_THRESHOLD:
            host = server_host(self._url_formatter.web_url())
            logger.warning(
                "Warning: Change with %d files on host %s, project %s, ref %s",
                changed_files,
                host,
                context.project,
                ref_name,
            )
            self._metrics.increment(
                FILE_COUNT_METRIC, changed_files, f"{host}/{context.project}"
            )
        return ValidationInfo.passed()
