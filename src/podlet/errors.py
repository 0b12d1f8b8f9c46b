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
Exceptions raised by the generators, the compose converter and the service layer.

Failures coming from collaborators (inspect lookups, file reads), from PyYAML
or from pydantic validation are never wrapped in these.
"""


class PodletError(Exception):
    """Base class for errors raised by podlet itself."""


class UnsupportedQuadletTypeError(PodletError, ValueError):
    """
    Raised when a quadlet type has no generator (or no compose target) implemented.
    """

    def __init__(self, quadlet_type):
        self.type = quadlet_type
        name = getattr(quadlet_type, "value", quadlet_type)
        super().__init__(f"cannot generate quadlet type {name}: unsupported")


class QuadletOptionsMismatchError(PodletError, ValueError):
    """
    Raised when the generate options are tagged with a different type than requested.
    """

    def __init__(self, requested, received):
        self.requested = requested
        self.received = received
        super().__init__(
            f"options of type {getattr(received, 'value', received)} cannot be used "
            f"to generate quadlet type {getattr(requested, 'value', requested)}"
        )


class ComposeError(PodletError, ValueError):
    """Raised when a compose document cannot be turned into a compose model."""
