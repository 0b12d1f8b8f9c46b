"""
Generator producing `.image` Quadlet units.
"""
from typing import Tuple

from ..BUILDERS.base import ImageGeneratorDependencies, ImageQuadletBuilder
from ..BUILDERS.image import image_unit
from ..MODELS.quadlet import ImageQuadlet
from .generator import Generator


class ImageGenerator(Generator[ImageGeneratorDependencies]):
    """Generates an image unit pulling the inspected image."""

    BUILDERS: Tuple[ImageQuadletBuilder, ...] = (image_unit,)
    SEED: ImageQuadlet = {"Image": {}}
