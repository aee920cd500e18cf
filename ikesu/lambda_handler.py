"""AWS Lambda entrypoint running the same check as `ikesu check`."""

from typing import Any

from loguru import logger

from ikesu.config import AppConfig
from ikesu.inspection.domain.exceptions import ConfigurationError
from ikesu.inspection.domain.models import CheckStatus
from ikesu.inspection.infrastructure.container import init_container
from ikesu.inspection.infrastructure.logging import configure_logging
from ikesu.inspection.infrastructure.rule_loader import load_check_config


def handler(event: dict[str, Any] | None, context: Any = None) -> dict[str, Any]:
    """
    Run one check from environment configuration.

    The event may override `config` (rule file location) and `dry_run`.
    Errors propagate so the invocation is recorded as failed.
    """
    event = event or {}
    config = AppConfig()
    if event.get("config"):
        config = config.model_copy(
            update={"inspection": config.inspection.model_copy(update={"check_config": event["config"]})}
        )

    configure_logging(config.logging.level, config.logging.file, config.logging.serialize)
    if not config.mackerel.apikey:
        raise ConfigurationError("The Mackerel API key is not specified (MACKEREL_APIKEY).")

    container = init_container(config)
    check_config = load_check_config(config.inspection.check_config, container.rule_loaders())

    client = container.mackerel_client()
    try:
        result = container.check_use_case(dry_run=bool(event.get("dry_run"))).run(check_config)
    finally:
        client.close()

    logger.info(f"Lambda invocation finished with {len(result.reports)} reports")
    return {
        "checked_at": result.checked_at,
        "reports": len(result.reports),
        "critical": sum(1 for report in result.reports if report.status == CheckStatus.CRITICAL),
        "skipped": len(result.skipped),
    }
