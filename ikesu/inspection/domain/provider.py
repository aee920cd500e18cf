"""Derive the provider tag used to pick inspection metrics for a host."""

from ikesu.inspection.domain.models import Host

AGENT_SIGNATURE = "mackerel-agent"
CONTAINER_AGENT_SIGNATURE = "mackerel-container-agent"


def classify_provider(host: Host) -> str:
    """
    Classify a host as "<agent>-<cloud provider>" (either part optional).

    - mackerel-agent: "agent", followed by the cloud provider if any
    - mackerel-container-agent: "container-agent", cloud provider ignored
    - any other agent name: the host was most likely created through the API,
      no component is emitted and the cloud provider is ignored
    - no agent: the cloud provider alone

    An empty string means the host cannot be classified.
    """
    components: list[str] = []
    skip_cloud = False

    agent_name = host.meta.agent_name
    if agent_name:
        if AGENT_SIGNATURE in agent_name:
            components.append("agent")
        elif CONTAINER_AGENT_SIGNATURE in agent_name:
            components.append("container-agent")
            skip_cloud = True
        else:
            skip_cloud = True

    cloud = host.meta.cloud
    if not skip_cloud and cloud is not None and cloud.provider:
        components.append(cloud.provider)

    return "-".join(components)
