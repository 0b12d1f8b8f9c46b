"""
Environment= for variables the container sets on top of its image.
"""
from ..MODELS.quadlet import UnitDefinition, patch_section
from .base import ContainerGeneratorDependencies

# Injected by podman into every container.
RUNTIME_ENV_PREFIXES = ("container=", "HOSTNAME=")


def environment(deps: ContainerGeneratorDependencies, unit: UnitDefinition) -> UnitDefinition:
    inherited = set(deps.image.config.env)
    env = [
        entry
        for entry in deps.container.config.env
        if entry not in inherited and not entry.startswith(RUNTIME_ENV_PREFIXES)
    ]
    if not env:
        return unit
    return patch_section(unit, "Container", Environment=env)
