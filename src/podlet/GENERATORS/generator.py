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
Base class of the Quadlet generators.
"""
import logging
from functools import reduce
from typing import Callable, Generic, Sequence, TypeVar

from ..MODELS.quadlet import UnitDefinition
from ..CONVERTERS.to_quadlet import stringify

logger = logging.getLogger(__name__)

D = TypeVar("D")


class Generator(Generic[D]):
    """
    Runs an ordered list of builders over a seed unit and renders the result.

    Subclasses declare `BUILDERS` and `SEED`. The order of `BUILDERS` is part
    of the output format: it decides the order of keys in the unit file.
    """

    BUILDERS: Sequence[Callable[[D, UnitDefinition], UnitDefinition]] = ()
    SEED: UnitDefinition = {}

    def __init__(self, dependencies: D):
        """
        Initializes the generator.

        :param dependencies: The inspect records and options the builders read.
        """
        self.dependencies = dependencies

    def build(self) -> UnitDefinition:
        """
        Folds every builder, left to right, over a fresh copy of the seed.

        :return: The unit definition.
        """
        seed = {section: dict(entries) for section, entries in self.SEED.items()}
        return reduce(self._apply, self.BUILDERS, seed)

    def _apply(self, unit: UnitDefinition, builder) -> UnitDefinition:
        logger.debug("%s: applying %s", type(self).__name__, builder.__name__)
        return builder(self.dependencies, unit)

    def generate(self) -> str:
        """
        Builds the unit and renders it as unit file text.
        """
        return stringify(self.build())
