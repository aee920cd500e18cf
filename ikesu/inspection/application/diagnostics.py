"""Operator listing of the known providers and their inspection metrics."""

from ikesu.inspection.domain.catalog import InspectionMetricCatalog


def render_provider_listing(catalog: InspectionMetricCatalog) -> str:
    """List provider -> inspection metric pairs for each integration family."""
    lines = []
    for family in catalog.list_families():
        lines.append(f"Integration: {family}")
        lines.append("-" * 35)
        for provider, metric in catalog.family_entries(family).items():
            lines.append(f"provider: {provider:<25}, metric: {metric}")
        lines.append("")
    return "\n".join(lines)
