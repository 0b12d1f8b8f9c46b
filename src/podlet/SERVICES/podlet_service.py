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
Service exposing Quadlet generation and compose conversion to callers.

The service fetches inspect records through its collaborators, dispatches on
the requested quadlet type, and records a telemetry event for every call.
"""
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field

from ..BUILDERS.base import ContainerGeneratorDependencies, ImageGeneratorDependencies
from ..CONVERTERS.to_kube_play import KubePlayConverter
from ..GENERATORS.container_generator import ContainerGenerator
from ..GENERATORS.image_generator import ImageGenerator
from ..MODELS.inspect_info import ContainerInspectInfo
from ..MODELS.quadlet_type import ContainerGenerateOptions, QuadletType, parse_generate_options
from ..PARSERS.compose_parser import ComposeParser
from ..errors import QuadletOptionsMismatchError, UnsupportedQuadletTypeError
from .telemetry import PODLET_COMPOSE, PODLET_GENERATE, TelemetryLogger, telemetry_scope

logger = logging.getLogger(__name__)


class ProviderContainerConnectionIdentifierInfo(BaseModel):
    """
    Identifies a container engine connection of a provider.
    """
    provider_id: str = Field(alias="providerId")
    name: str

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class ContainerService(Protocol):
    def get_engine_id(self, connection: ProviderContainerConnectionIdentifierInfo) -> str:
        ...

    def inspect_container(self, engine_id: str, container_id: str) -> Any:
        ...


class ImageService(Protocol):
    def inspect_image(self, engine_id: str, image_id: str) -> Any:
        ...


def read_text(filepath: str) -> str:
    return Path(filepath).read_text(encoding="utf-8")


def _kind_name(kind: Any) -> str:
    """Lowercase name of a quadlet type, or of whatever value was passed instead."""
    return str(getattr(kind, "value", kind)).lower()


class PodletService:
    """
    Generates Quadlet units from live resources and kube-play manifests from compose files.
    """

    def __init__(self,
                 containers: ContainerService,
                 images: ImageService,
                 telemetry: TelemetryLogger,
                 read_file: Callable[[str], str] = read_text,
                 compose_context: Optional[Dict[str, str]] = None):
        """
        Initializes the service.

        :param containers: Resolves engine ids and inspects containers.
        :param images: Inspects images.
        :param telemetry: Receives one usage event per call.
        :param read_file: Reads a UTF-8 file; defaults to the local filesystem.
        :param compose_context: Variables for ${VAR} interpolation in compose files.
        """
        self.containers = containers
        self.images = images
        self.telemetry = telemetry
        self.read_file = read_file
        self.compose_context = compose_context or {}

    def _generate_container(self, engine_id: str, container_id: str, options: ContainerGenerateOptions) -> str:
        container = self.containers.inspect_container(engine_id, container_id)
        if not isinstance(container, ContainerInspectInfo):
            container = ContainerInspectInfo.model_validate(container)
        image = self.images.inspect_image(engine_id, container.image)

        return ContainerGenerator(ContainerGeneratorDependencies.from_records(
            container=container,
            image=image,
            options=options.generator_options(),
        )).generate()

    def _generate_image(self, engine_id: str, image_id: str) -> str:
        image = self.images.inspect_image(engine_id, image_id)
        return ImageGenerator(ImageGeneratorDependencies.from_records(image)).generate()

    def generate(self,
                 connection: ProviderContainerConnectionIdentifierInfo,
                 type: QuadletType,
                 options: Any,
                 resource_id: str) -> str:
        """
        Generates the Quadlet unit of a resource.

        :param connection: The engine connection owning the resource.
        :param type: The quadlet type to generate.
        :param options: Options tagged with the same `type` (model or mapping).
        :param resource_id: Id of the container or image.
        :return: The unit file content.
        :raises UnsupportedQuadletTypeError: If no generator exists for `type`.
        :raises QuadletOptionsMismatchError: If `options` are tagged with another type.
        """
        records: Dict[str, Any] = {"quadlet-type": _kind_name(type)}

        with telemetry_scope(self.telemetry, PODLET_GENERATE, records):
            type = QuadletType(type)
            engine_id = self.containers.get_engine_id(connection)
            options = parse_generate_options(options)
            if options.type != type:
                raise QuadletOptionsMismatchError(type, options.type)

            logger.debug("generating %s quadlet for %s on %s", type.lower(), resource_id, engine_id)
            if type == QuadletType.CONTAINER:
                return self._generate_container(engine_id, resource_id, options)
            if type == QuadletType.IMAGE:
                return self._generate_image(engine_id, resource_id)
            raise UnsupportedQuadletTypeError(type)

    def compose(self, filepath: str, type: QuadletType) -> str:
        """
        Converts a compose file into the requested target.

        :param filepath: Path of the compose file.
        :param type: Target type; only KUBE is supported.
        :return: The kube-play manifest.
        :raises UnsupportedQuadletTypeError: For any target other than KUBE.
        """
        records: Dict[str, Any] = {"quadlet-target-type": _kind_name(type)}

        with telemetry_scope(self.telemetry, PODLET_COMPOSE, records):
            type = QuadletType(type)
            if type != QuadletType.KUBE:
                raise UnsupportedQuadletTypeError(type)
            content = self.read_file(filepath)
            compose = ComposeParser(self.compose_context).parse_from_string(content)
            return KubePlayConverter(compose).convert()
