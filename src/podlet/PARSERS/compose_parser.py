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
Parsers for Compose YAML files.
"""
import logging
import re
import yaml
from typing import Dict, Optional
from ..MODELS.compose_file import ComposeFile
from ..UTILS.string_interpolation import EnvironmentInterpolator
from ..errors import ComposeError

logger = logging.getLogger(__name__)

_INT_TAG = "tag:yaml.org,2002:int"


class ComposeLoader(yaml.SafeLoader):
    """
    Safe loader reading integers the way Compose does: YAML 1.1 base 60
    integers are not recognised, so an unquoted `2222:22` stays a string.
    """


ComposeLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _INT_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
ComposeLoader.add_implicit_resolver(
    _INT_TAG,
    re.compile(r"""^(?:[-+]?0b[0-1_]+
    |[-+]?0[0-7_]+
    |[-+]?(?:0|[1-9][0-9_]*)
    |[-+]?0x[0-9a-fA-F_]+)$""", re.X),
    list("-+0123456789"),
)


class ComposeParser:
    """
    Parser for compose.yaml / docker-compose.yml files.
    """
    def __init__(self, context: Optional[Dict[str, str]] = None):
        """
        Initializes the parser with an optional context for variable interpolation.

        :param context: Variables available to ${VAR} placeholders. Nothing is
            read from the process environment unless it is passed here.
        """
        self.context = context or {}

    def parse(self, compose_path: str) -> ComposeFile:
        """
        Parses a compose file from a path.

        :param compose_path: Path to the compose file.
        :return: Parsed compose document.
        """
        with open(compose_path, 'r', encoding='utf-8') as f:
            content = f.read()
        return self.parse_from_string(content)

    def parse_from_string(self, content: str) -> ComposeFile:
        """
        Parses a compose file from a string.

        :param content: YAML content of the compose file.
        :return: Parsed compose document.
        :raises yaml.YAMLError: If the content is not valid YAML.
        :raises ComposeError: If the YAML is not a compose document.
        :raises pydantic.ValidationError: If a service key has an invalid value.
        """
        data = yaml.load(content, Loader=ComposeLoader)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ComposeError("compose document must be a mapping")
        if not isinstance(data.get('services') or {}, dict):
            raise ComposeError("services must be a mapping")
        for name, spec in (data.get('services') or {}).items():
            if spec is not None and not isinstance(spec, dict):
                raise ComposeError(f"service {name} must be a mapping")

        data = EnvironmentInterpolator.interpolate_data(data, self.context)
        compose = ComposeFile.model_validate(data)

        for name, service in compose.services.items():
            if service.model_extra:
                logger.debug("service %s: ignoring keys %s", name, ", ".join(sorted(service.model_extra)))
        return compose
