"""
Exec= when the container runs other arguments than the image's default command.
"""
import shlex

from ..MODELS.quadlet import UnitDefinition, patch_section
from .base import ContainerGeneratorDependencies, arrays_equal


def exec_args(deps: ContainerGeneratorDependencies, unit: UnitDefinition) -> UnitDefinition:
    cmd = deps.container.config.cmd
    if not cmd or arrays_equal(cmd, deps.image.config.cmd):
        return unit
    return patch_section(unit, "Container", Exec=shlex.join(cmd))
