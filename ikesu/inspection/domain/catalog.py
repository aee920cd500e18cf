"""Registry of the metric that best represents the health of each provider."""

from collections.abc import Mapping
from types import MappingProxyType

# Metric that must keep being posted for a host of each provider, grouped by
# integration family. Combinations of agent and cloud integration are listed
# separately (e.g. agent-ec2). An empty name means no single metric is known
# to represent the provider. Wildcard metric names are not supported.
DEFAULT_INTEGRATION_FAMILIES: dict[str, dict[str, str]] = {
    # https://mackerel.io/docs/entry/integrations/aws
    "aws": {
        "ec2": "custom.ec2.status_check_failed.instance",
        "elb": "custom.elb.host_count.healthy",
        "alb": "custom.alb.request.count",
        "nlb": "custom.nlb.bytes.processed",
        "rds": "custom.rds.cpu.used",
        "elasticache": "custom.elasticache.cpu.used",
        "redshift": "custom.redshift.cpu.used",
        "lambda": "custom.lambda.count.invocations",
        "sqs": "",
        "dynamodb": "",
        "cloudfront": "",
        "apigateway": "",
        "kinesis": "",
        "s3": "",
        "es": "",
        "ecs": "",
        "ses": "",
        "stepfunctions": "",
        "efs": "",
        "firehose": "",
        "batch": "",
        "waf": "",
        "billing": "",
        "route53": "",
        "connect": "",
        "docdb": "",
        "codebuild": "",
    },
    # https://mackerel.io/docs/entry/integrations/azure
    "azure": {
        "sql_database": "",
        "redis_cache": "",
        "virtual_machine": "",
        "app_service": "",
        "functions": "",
        "load_balancer": "",
        "db_for_mysql": "",
        "db_for_postgresql": "",
        "application_gateway": "",
        "blob_storage": "",
        "files": "",
    },
    # https://mackerel.io/docs/entry/integrations/gcp
    "gcp": {
        "computeengine": "",
        "cloudsql": "",
        "appengine": "",
    },
    # Cloud integration together with an installed agent. Container agents
    # behave the same on every platform and are covered by "container-agent".
    "with-agent": {
        "agent-ec2": "custom.ec2.status_check_failed.instance",
        "agent-vm": "",
        "agent-computeengine": "",
    },
    # Agent-only hosts are covered by connectivity monitoring or retirement.
    "only-agent": {
        "agent": "",
        "container-agent": "",
    },
}


class InspectionMetricCatalog:
    """
    Immutable provider -> inspection metric lookup.

    Built once at startup and handed to the components that need it.
    Provider keys are matched case-insensitively.
    """

    def __init__(self, families: Mapping[str, Mapping[str, str]] | None = None):
        source = DEFAULT_INTEGRATION_FAMILIES if families is None else families
        self._families: Mapping[str, Mapping[str, str]] = MappingProxyType(
            {
                family: MappingProxyType({provider.lower(): metric for provider, metric in entries.items()})
                for family, entries in source.items()
            }
        )

    def lookup(self, provider: str) -> str | None:
        """
        Return the suggested inspection metric for a provider.

        Returns None when the provider is unknown or has no reliable metric.
        """
        key = provider.lower()
        for entries in self._families.values():
            if key in entries:
                return entries[key] or None
        return None

    def is_known(self, provider: str) -> bool:
        key = provider.lower()
        return any(key in entries for entries in self._families.values())

    def list_providers(self) -> list[str]:
        """All known providers in ascending order, not in definition order."""
        return sorted(provider for entries in self._families.values() for provider in entries)

    def list_families(self) -> list[str]:
        return list(self._families)

    def family_entries(self, family: str) -> dict[str, str]:
        """Provider -> metric pairs of one family, sorted by provider."""
        entries = self._families.get(family, {})
        return {provider: entries[provider] for provider in sorted(entries)}
