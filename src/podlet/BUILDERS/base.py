# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Shared pieces of the Quadlet field builders.

A builder is a plain function `(dependencies, unit) -> unit`. It reads the
inspect records and options held by `dependencies`, and returns a new unit
definition with the keys of its own concern set. Builders never modify the
unit they receive and never touch keys owned by another builder.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from ..MODELS.inspect_info import ContainerInspectInfo, ImageInspectInfo
from ..MODELS.quadlet import UnitDefinition
from ..MODELS.quadlet_type import ContainerGeneratorOptions


@dataclass(frozen=True)
class ContainerGeneratorDependencies:
    """Inputs of the container generator."""

    container: ContainerInspectInfo
    image: ImageInspectInfo
    options: ContainerGeneratorOptions = field(default_factory=ContainerGeneratorOptions)

    @classmethod
    def from_records(cls, container: Any, image: Any,
                     options: Optional[Any] = None) -> "ContainerGeneratorDependencies":
        """
        Builds the dependencies from raw inspect JSON (or already validated models).

        :raises pydantic.ValidationError: If a record does not have the inspect shape.
        """
        if not isinstance(container, ContainerInspectInfo):
            container = ContainerInspectInfo.model_validate(container)
        if not isinstance(image, ImageInspectInfo):
            image = ImageInspectInfo.model_validate(image)
        if options is None:
            options = ContainerGeneratorOptions()
        elif not isinstance(options, ContainerGeneratorOptions):
            options = ContainerGeneratorOptions.model_validate(options)
        return cls(container=container, image=image, options=options)


@dataclass(frozen=True)
class ImageGeneratorDependencies:
    """Inputs of the image generator."""

    image: ImageInspectInfo

    @classmethod
    def from_records(cls, image: Any) -> "ImageGeneratorDependencies":
        if not isinstance(image, ImageInspectInfo):
            image = ImageInspectInfo.model_validate(image)
        return cls(image=image)


ContainerQuadletBuilder = Callable[[ContainerGeneratorDependencies, UnitDefinition], UnitDefinition]
ImageQuadletBuilder = Callable[[ImageGeneratorDependencies, UnitDefinition], UnitDefinition]


def arrays_equal(a: Any, b: Any) -> bool:
    """
    Element-wise, order sensitive comparison of two sequences.

    None, and anything that is not a list or tuple, only equals itself.
    """
    if a is b:
        return True
    if not isinstance(a, (list, tuple)) or not isinstance(b, (list, tuple)):
        return False
    if len(a) != len(b):
        return False
    for left, right in zip(a, b):
        if left != right:
            return False
    return True
