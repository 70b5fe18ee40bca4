"""Commit gate entrypoint: wires settings and server services together."""

from __future__ import annotations

import logging

from commitgate.backends.base import (
    CopyConditionParser,
    MetricsSink,
    ProjectCache,
    ProjectConfigLoader,
)
from commitgate.backends.urls import CanonicalUrlFormatter
from commitgate.settings import GateSettings, configure_logging, load_settings
from commitgate.validator.base import CommitValidator
from commitgate.validator.factory import ValidatorFactory
from commitgate.validator.pipeline import CommitValidationObserver

logger = logging.getLogger(__name__)


def create_validator_factory(
    project_cache: ProjectCache,
    config_loader: ProjectConfigLoader,
    metrics: MetricsSink,
    copy_condition_parser: CopyConditionParser,
    plugin_validators: list[CommitValidator] | None = None,
    observers: list[CommitValidationObserver] | None = None,
    settings: GateSettings | None = None,
) -> ValidatorFactory:
    """Build the server-wide ValidatorFactory.

    Settings are loaded from disk (or the environment) unless given.
    Plugin validators and observers keep the order they are passed in.
    """
    configure_logging()

    if settings is None:
        settings = load_settings()
    logger.info(
        "Commit gate starting with settings: %s",
        settings.model_dump(exclude={"server_ident"}),
    )

    plugin_validators = list(plugin_validators or [])
    if plugin_validators:
        logger.info(
            "Registered %d plugin validator(s): %s",
            len(plugin_validators),
            ", ".join(v.validator_name for v in plugin_validators),
        )

    return ValidatorFactory(
        settings=settings,
        url_formatter=CanonicalUrlFormatter(settings.canonical_web_url),
        project_cache=project_cache,
        config_loader=config_loader,
        metrics=metrics,
        copy_condition_parser=copy_condition_parser,
        plugin_validators=plugin_validators,
        observers=observers,
    )
