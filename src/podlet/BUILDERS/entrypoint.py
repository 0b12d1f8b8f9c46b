"""
Entrypoint= when the container overrides the image's entrypoint.
"""
import json

from ..MODELS.quadlet import UnitDefinition, patch_section
from .base import ContainerGeneratorDependencies, arrays_equal


def format_entrypoint(entrypoint) -> str:
    """A single element is written as is, several as a JSON array."""
    if len(entrypoint) == 1:
        return entrypoint[0]
    return json.dumps(list(entrypoint))


def entrypoint(deps: ContainerGeneratorDependencies, unit: UnitDefinition) -> UnitDefinition:
    current = deps.container.config.entrypoint
    if not current or arrays_equal(current, deps.image.config.entrypoint):
        return unit
    return patch_section(unit, "Container", Entrypoint=format_entrypoint(current))
