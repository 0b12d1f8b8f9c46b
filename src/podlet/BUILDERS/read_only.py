from ..MODELS.quadlet import UnitDefinition, patch_section
from .base import ContainerGeneratorDependencies


def read_only(deps: ContainerGeneratorDependencies, unit: UnitDefinition) -> UnitDefinition:
    """ReadOnly=true for a read-only root filesystem; nothing otherwise."""
    if not deps.container.host_config.readonly_rootfs:
        return unit
    return patch_section(unit, "Container", ReadOnly=True)
