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
Generator producing `.container` Quadlet units from a container and its image.
"""
from typing import Tuple

from ..BUILDERS.base import ContainerGeneratorDependencies, ContainerQuadletBuilder
from ..BUILDERS.add_host import add_host
from ..BUILDERS.capability import capability
from ..BUILDERS.annotation import annotation
from ..BUILDERS.label import label
from ..BUILDERS.publish_port import publish_port
from ..BUILDERS.image import image
from ..BUILDERS.name import name
from ..BUILDERS.entrypoint import entrypoint
from ..BUILDERS.exec_args import exec_args
from ..BUILDERS.environment import environment
from ..BUILDERS.health_check import health_check
from ..BUILDERS.read_only import read_only
from ..BUILDERS.mount import mount
from ..BUILDERS.restart import restart
from ..BUILDERS.wanted_by import wanted_by
from ..MODELS.quadlet import ContainerQuadlet
from .generator import Generator


class ContainerGenerator(Generator[ContainerGeneratorDependencies]):
    """
    Generates a container unit.

    Example:
        ContainerGenerator(ContainerGeneratorDependencies.from_records(
            container=container_inspect, image=image_inspect, options={"wantedBy": "default.target"},
        )).generate()
    """

    BUILDERS: Tuple[ContainerQuadletBuilder, ...] = (
        add_host,
        capability,
        annotation,
        label,
        publish_port,
        image,
        name,
        entrypoint,
        exec_args,
        environment,
        health_check,
        read_only,
        mount,
        restart,
        wanted_by,
    )
    SEED: ContainerQuadlet = {"Container": {}}
