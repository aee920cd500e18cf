"""Domain models for the inspection engine."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ikesu.inspection.domain.catalog import InspectionMetricCatalog
from ikesu.inspection.domain.exceptions import ConfigurationError
from ikesu.inspection.domain.interval import InterruptedInterval

NO_RULES_DEFINED = "No rules defined."


# Rule configuration
class Rule(BaseModel):
    """A check rule as written in the YAML configuration."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    service: str = ""
    roles: list[str] | None = None
    interrupted_interval: InterruptedInterval = Field(default_factory=InterruptedInterval)
    providers: list[str] = Field(default_factory=list, description="Allow-list of providers to inspect")
    inspection_metrics: dict[str, list[str]] = Field(
        default_factory=dict, description="Additional metrics to inspect, per provider"
    )

    @field_validator("providers", mode="before")
    @classmethod
    def _normalize_providers(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [str(provider).lower() for provider in value]
        return value

    @field_validator("inspection_metrics", mode="before")
    @classmethod
    def _normalize_inspection_metrics(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, dict):
            return {str(provider).lower(): metrics or [] for provider, metrics in value.items()}
        return value

    def validation_errors(self, catalog: InspectionMetricCatalog) -> list[str]:
        """Return every problem found in this rule."""
        errors = []
        if not self.name:
            errors.append("No name has been specified for the check.")
        if not self.service:
            errors.append(f"Service not specified for check '{self.name}'.")
        if range_error := self.interrupted_interval.range_error():
            errors.append(range_error)
        for provider in self.providers:
            if not catalog.is_known(provider):
                errors.append(f"unsupported provider, {provider} has been set")
        return errors

    def allows(self, provider: str) -> bool:
        """Whether hosts of this provider are inspected by the rule."""
        return not self.providers or provider.lower() in self.providers

    def metric_overrides(self, provider: str) -> list[str]:
        return list(self.inspection_metrics.get(provider.lower(), []))


class CheckConfig(BaseModel):
    """The whole check configuration file."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    rules: list[Rule] = Field(default_factory=list, alias="check")

    @field_validator("rules", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    def validate_rules(self, catalog: InspectionMetricCatalog) -> None:
        """
        Validate all rules at once.

        Raises:
            ConfigurationError: listing the problems of every rule
        """
        if not self.rules:
            raise ConfigurationError(NO_RULES_DEFINED, [NO_RULES_DEFINED])

        errors = []
        for rule in self.rules:
            errors.extend(rule.validation_errors(catalog))
        if errors:
            raise ConfigurationError.from_errors(errors)


# Mackerel entities
class CloudMeta(BaseModel):
    """Cloud integration metadata attached to a host."""

    model_config = ConfigDict(extra="ignore")

    provider: str = ""

    @field_validator("provider", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class HostMeta(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    agent_name: str = Field(default="", alias="agent-name")
    cloud: CloudMeta | None = None

    @field_validator("agent_name", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class Host(BaseModel):
    """A host registered in Mackerel."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str = ""
    meta: HostMeta = Field(default_factory=HostMeta)

    @field_validator("name", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("meta", mode="before")
    @classmethod
    def _null_as_default(cls, value: Any) -> Any:
        return {} if value is None else value


class MetricValue(BaseModel):
    model_config = ConfigDict(extra="ignore")

    time: int
    value: Any = None


# Inspection results
class CheckStatus(str, Enum):
    """Status of a check report."""

    OK = "OK"
    CRITICAL = "CRITICAL"


class SkipReason(str, Enum):
    """Why a host produced no check report."""

    PROVIDER_NOT_ALLOWED = "provider_not_allowed"  # Rule allow-list excludes the provider
    NO_INSPECTION_METRICS = "no_inspection_metrics"  # Nothing meaningful to inspect


@dataclass(frozen=True)
class CheckReport:
    """Health status of one host for one rule."""

    host_id: str
    name: str
    status: CheckStatus
    message: str
    occurred_at: int

    def to_dict(self) -> dict:
        """Convert to the Mackerel check report payload."""
        return {
            "source": {"type": "host", "hostId": self.host_id},
            "name": self.name,
            "status": self.status.value,
            "message": self.message,
            "occurredAt": self.occurred_at,
        }


@dataclass(frozen=True)
class HostSkip:
    """A host that was resolved for a rule but not inspected."""

    rule_name: str
    host_id: str
    provider: str
    reason: SkipReason


@dataclass
class EvaluationResult:
    """Outcome of evaluating a list of rules."""

    checked_at: int
    reports: list[CheckReport] = field(default_factory=list)
    skipped: list[HostSkip] = field(default_factory=list)
