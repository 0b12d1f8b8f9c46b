"""
Mount= for the filesystems attached to the container.
"""
import re

from ..MODELS.quadlet import UnitDefinition, patch_section
from .base import ContainerGeneratorDependencies

_ANONYMOUS_VOLUME = re.compile(r"[0-9a-f]{64}")


def _is_anonymous(mount) -> bool:
    """
    Anonymous volumes, from the image's VOLUME declarations or from a bare
    `-v /path`, are named after a random 64 hex digit id and recreated by the
    runtime on every start. A named volume is kept even when it is mounted
    over a path the image declares as a volume.
    """
    return bool(_ANONYMOUS_VOLUME.fullmatch(mount.name))


def format_mount(mount) -> str:
    """
    Formats a mount in the `--mount` syntax, e.g. `type=bind,source=/srv,destination=/data,ro=true`.
    """
    options = [f"type={mount.type}"]
    if mount.type == "volume":
        options.append(f"source={mount.name or mount.source}")
    elif mount.type != "tmpfs" and mount.source:
        options.append(f"source={mount.source}")
    options.append(f"destination={mount.destination}")
    if not mount.rw:
        options.append("ro=true")
    return ",".join(options)


def mount(deps: ContainerGeneratorDependencies, unit: UnitDefinition) -> UnitDefinition:
    mounts = [
        format_mount(entry)
        for entry in deps.container.mounts
        if not (entry.type == "volume" and _is_anonymous(entry))
    ]
    if not mounts:
        return unit
    return patch_section(unit, "Container", Mount=mounts)
