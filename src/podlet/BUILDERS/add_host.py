"""
AddHost= from the container's extra /etc/hosts entries.
"""
from ..MODELS.quadlet import UnitDefinition, patch_section
from .base import ContainerGeneratorDependencies


def add_host(deps: ContainerGeneratorDependencies, unit: UnitDefinition) -> UnitDefinition:
    """Copies `HostConfig.ExtraHosts` (`hostname:ip`) in order."""
    hosts = deps.container.host_config.extra_hosts
    if not hosts:
        return unit
    return patch_section(unit, "Container", AddHost=list(hosts))
