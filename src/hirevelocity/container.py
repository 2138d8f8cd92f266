"""Dependency injection container for the velocity tooling."""

from __future__ import annotations

from dependency_injector import containers, providers

from .core import DEFAULT_THRESHOLDS, VelocityEngine
from .core.timeutils import to_datetime
from .pipeline import OutputWriter, VelocityPipeline
from .schemas import FilterSpec


class VelocityContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    thresholds = providers.Object(DEFAULT_THRESHOLDS)

    now_provider = providers.Object(None)

    default_filters = providers.Object(None)

    engine = providers.Singleton(
        VelocityEngine,
        thresholds=thresholds,
        now_provider=now_provider,
    )

    writer = providers.Singleton(OutputWriter)

    pipeline = providers.Factory(
        VelocityPipeline,
        engine=engine,
        default_filters=default_filters,
        writer=writer,
    )


def create_container(*, settings: dict | None = None) -> VelocityContainer:
    """Instantiate container with optional filter and reference-date overrides."""

    container = VelocityContainer()

    if not settings:
        return container

    filter_settings = settings.get("filters") if isinstance(settings, dict) else None
    if filter_settings:
        container.default_filters.override(
            providers.Object(FilterSpec.model_validate(filter_settings))
        )

    as_of = settings.get("as_of") if isinstance(settings, dict) else None
    if as_of:
        pinned = to_datetime(as_of)
        if pinned is None:
            raise ValueError(f"Unparseable as_of setting: {as_of!r}")
        container.now_provider.override(providers.Object(lambda: pinned))

    return container
