"""
Annotation= from the container's OCI annotations.
"""
from ..MODELS.quadlet import UnitDefinition, patch_section
from .base import ContainerGeneratorDependencies

# Set by podman on every container it creates.
RUNTIME_ANNOTATION_PREFIXES = (
    "io.container.manager",
    "io.podman.annotations.",
    "io.kubernetes.cri-o.",
    "org.opencontainers.image.stopSignal",
    "org.systemd.property.",
)


def _is_runtime_annotation(key: str) -> bool:
    return key.startswith(RUNTIME_ANNOTATION_PREFIXES)


def annotation(deps: ContainerGeneratorDependencies, unit: UnitDefinition) -> UnitDefinition:
    """
    Emits `key=value` for every annotation the user set on the container.

    Annotations added by the runtime, and those inherited unchanged from the
    image, are skipped.
    """
    inherited = deps.image.annotations
    annotations = [
        f"{key}={value}"
        for key, value in deps.container.config.annotations.items()
        if not _is_runtime_annotation(key) and inherited.get(key) != value
    ]
    if not annotations:
        return unit
    return patch_section(unit, "Container", Annotation=annotations)
