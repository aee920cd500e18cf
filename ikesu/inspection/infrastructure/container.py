"""Dependency injection container for the inspection engine."""

from dependency_injector import containers, providers

from ikesu.config import AppConfig


class IkesuContainer(containers.DeclarativeContainer):
    """Dependency injection container for the inspection engine."""

    config = providers.Configuration()

    # Infrastructure - Mackerel API (host directory, metrics source and report sink)
    from ikesu.inspection.infrastructure.mackerel_client import MackerelClient

    mackerel_client = providers.Singleton(
        MackerelClient,
        api_key=config.mackerel.apikey,
        base_url=config.mackerel.apibase,
        timeout_seconds=config.mackerel.timeout_seconds,
    )

    # Infrastructure - Rule loaders by URI scheme
    from ikesu.inspection.infrastructure.rule_loader import default_loaders

    rule_loaders = providers.Singleton(
        default_loaders,
        timeout_seconds=config.mackerel.timeout_seconds,
    )

    # Domain - Provider catalog
    from ikesu.inspection.domain.catalog import InspectionMetricCatalog

    catalog = providers.Singleton(InspectionMetricCatalog)

    # Application - Services
    from ikesu.inspection.application.gap_detector import MetricGapDetector
    from ikesu.inspection.application.report_batcher import ReportBatcher
    from ikesu.inspection.application.rule_evaluator import RuleEvaluator

    gap_detector = providers.Factory(
        MetricGapDetector,
        metrics_source=mackerel_client,
        max_fetch_span_seconds=config.inspection.max_fetch_span_seconds,
        fetch_delay_seconds=config.inspection.fetch_delay_seconds,
    )

    rule_evaluator = providers.Factory(
        RuleEvaluator,
        host_directory=mackerel_client,
        catalog=catalog,
        gap_detector=gap_detector,
    )

    report_batcher = providers.Factory(
        ReportBatcher,
        sink=mackerel_client,
        batch_size=config.inspection.report_batch_size,
    )

    # Application - Use Cases
    from ikesu.inspection.application.check_use_case import CheckUseCase

    check_use_case = providers.Factory(
        CheckUseCase,
        catalog=catalog,
        rule_evaluator=rule_evaluator,
        report_batcher=report_batcher,
    )


def init_container(config: AppConfig | None = None) -> IkesuContainer:
    """Build a container wired from the application configuration."""
    container = IkesuContainer()
    container.config.from_pydantic(config or AppConfig())
    return container
