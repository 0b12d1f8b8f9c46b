from ..MODELS.quadlet import UnitDefinition, patch_section
from .base import ContainerGeneratorDependencies


def name(deps: ContainerGeneratorDependencies, unit: UnitDefinition) -> UnitDefinition:
    """ContainerName= from the container name, without the leading slash Docker reports."""
    container_name = deps.container.name.lstrip("/")
    if not container_name:
        return unit
    return patch_section(unit, "Container", ContainerName=container_name)
