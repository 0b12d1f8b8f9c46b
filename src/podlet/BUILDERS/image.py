"""
Image= for container units, and the Image section of image units.
"""
from ..MODELS.quadlet import UnitDefinition, patch_section
from .base import ContainerGeneratorDependencies, ImageGeneratorDependencies


def image_reference(image) -> str:
    """
    Picks the most specific name of an image record: first tag, first digest, then the id.
    """
    if image.repo_tags:
        return image.repo_tags[0]
    if image.repo_digests:
        return image.repo_digests[0]
    return image.id


def image(deps: ContainerGeneratorDependencies, unit: UnitDefinition) -> UnitDefinition:
    """
    Uses the name the container was created from, falling back to the image record.
    """
    container = deps.container
    reference = container.image_name or container.config.image or image_reference(deps.image)
    return patch_section(unit, "Container", Image=reference)


def image_unit(deps: ImageGeneratorDependencies, unit: UnitDefinition) -> UnitDefinition:
    return patch_section(unit, "Image", Image=image_reference(deps.image))
