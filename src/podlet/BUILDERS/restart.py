"""
Restart= in the Service section from the container's restart policy.
"""
from ..MODELS.quadlet import UnitDefinition, patch_section
from .base import ContainerGeneratorDependencies

# systemd has no unless-stopped, a stopped unit is not restarted anyway
RESTART_POLICIES = {
    "always": "always",
    "unless-stopped": "always",
    "on-failure": "on-failure",
}


def restart(deps: ContainerGeneratorDependencies, unit: UnitDefinition) -> UnitDefinition:
    policy = RESTART_POLICIES.get(deps.container.host_config.restart_policy.name)
    if policy is None:
        return unit
    return patch_section(unit, "Service", Restart=policy)
