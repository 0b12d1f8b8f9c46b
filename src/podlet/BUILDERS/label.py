"""
Label= from the container's labels.
"""
from ..MODELS.quadlet import UnitDefinition, patch_section
from .base import ContainerGeneratorDependencies


def label(deps: ContainerGeneratorDependencies, unit: UnitDefinition) -> UnitDefinition:
    """Emits `key=value` for labels not inherited unchanged from the image."""
    inherited = deps.image.config.labels
    labels = [
        f"{key}={value}"
        for key, value in deps.container.config.labels.items()
        if inherited.get(key) != value
    ]
    if not labels:
        return unit
    return patch_section(unit, "Container", Label=labels)
