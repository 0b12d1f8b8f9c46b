from ..MODELS.quadlet import UnitDefinition, patch_section
from .base import ContainerGeneratorDependencies


def wanted_by(deps: ContainerGeneratorDependencies, unit: UnitDefinition) -> UnitDefinition:
    """WantedBy= in the Install section, only when requested through the options."""
    target = deps.options.wanted_by
    if not target:
        return unit
    return patch_section(unit, "Install", WantedBy=target)
