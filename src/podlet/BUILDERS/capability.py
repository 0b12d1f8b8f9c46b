"""
AddCapability= and DropCapability= from the container's capability changes.
"""
from ..MODELS.quadlet import UnitDefinition, patch_section
from .base import ContainerGeneratorDependencies


def capability(deps: ContainerGeneratorDependencies, unit: UnitDefinition) -> UnitDefinition:
    host_config = deps.container.host_config
    values = {}
    if host_config.cap_add:
        values["AddCapability"] = list(host_config.cap_add)
    if host_config.cap_drop:
        values["DropCapability"] = list(host_config.cap_drop)
    if not values:
        return unit
    return patch_section(unit, "Container", **values)
