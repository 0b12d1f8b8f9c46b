"""
Quadlet kinds and the generate options attached to each of them.
"""
from typing import Annotated, Literal, Optional, Union
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class QuadletType(str, Enum):
    """
    Kinds of Quadlet units.
    """
    CONTAINER = "CONTAINER"
    IMAGE = "IMAGE"
    POD = "POD"
    VOLUME = "VOLUME"
    NETWORK = "NETWORK"
    KUBE = "KUBE"

    def lower(self) -> str:
        return self.value.lower()


class GenerateOptions(BaseModel):
    """
    Base for the options a caller may pass along with a generate request.
    """
    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)


class ContainerGeneratorOptions(GenerateOptions):
    """
    Options understood by the container generator.
    """
    # e.g. `default.target` to start the container on boot
    wanted_by: Optional[str] = Field(default=None, alias="wantedBy")


class ContainerGenerateOptions(ContainerGeneratorOptions):
    type: Literal[QuadletType.CONTAINER] = QuadletType.CONTAINER

    def generator_options(self) -> ContainerGeneratorOptions:
        """Strips the type tag, leaving what the container generator consumes."""
        return ContainerGeneratorOptions(**self.model_dump(exclude={"type"}))


class ImageGenerateOptions(GenerateOptions):
    type: Literal[QuadletType.IMAGE] = QuadletType.IMAGE


class PodGenerateOptions(GenerateOptions):
    type: Literal[QuadletType.POD] = QuadletType.POD


class VolumeGenerateOptions(GenerateOptions):
    type: Literal[QuadletType.VOLUME] = QuadletType.VOLUME


class NetworkGenerateOptions(GenerateOptions):
    type: Literal[QuadletType.NETWORK] = QuadletType.NETWORK


QuadletGenerateOptions = Annotated[
    Union[
        ContainerGenerateOptions,
        ImageGenerateOptions,
        PodGenerateOptions,
        VolumeGenerateOptions,
        NetworkGenerateOptions,
    ],
    Field(discriminator="type"),
]

_OPTIONS_ADAPTER = TypeAdapter(QuadletGenerateOptions)
_TAGGED_OPTIONS = (
    ContainerGenerateOptions,
    ImageGenerateOptions,
    PodGenerateOptions,
    VolumeGenerateOptions,
    NetworkGenerateOptions,
)


def parse_generate_options(value) -> GenerateOptions:
    """
    Validates a mapping (or an already built options model) into the variant matching its `type` tag.

    :param value: A mapping such as `{"type": "CONTAINER", "wantedBy": "default.target"}`.
    :return: The options model for that quadlet type.
    :raises pydantic.ValidationError: If the tag is unknown or a field does not belong to the variant.
    """
    if isinstance(value, _TAGGED_OPTIONS):
        return value
    return _OPTIONS_ADAPTER.validate_python(value)
