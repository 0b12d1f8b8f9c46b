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
Converter rendering unit definitions into Quadlet unit file text.
"""
from typing import Any, List, Mapping, Tuple
from jinja2 import Environment
from ..MODELS.quadlet import TRAILING_SECTIONS

QUADLET_TEMPLATE = """
{% for section, entries in sections %}
{% if not loop.first %}

{% endif %}
[{{ section }}]
{% for key, value in entries %}
{{ key }}={{ value }}
{% endfor %}
{% endfor %}
"""

_ENVIRONMENT = Environment(trim_blocks=True, lstrip_blocks=True, autoescape=False)


def render_value(value: Any) -> str:
    """
    Renders a scalar the way Quadlet expects it (booleans as `true`/`false`).
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == []


class QuadletConverter:
    """
    Converts a unit definition into the INI-like text read by the Quadlet generator.

    Resource sections come first in the order they were added, followed by
    `Service` and `Install`. Sections without any key are left out, list
    values are written as one `Key=value` line per element and empty values
    are never written.
    """

    def __init__(self, unit: Mapping[str, Mapping[str, Any]]):
        """
        Initializes the converter.

        :param unit: The unit definition produced by a generator.
        """
        self.unit = unit
        self.template = _ENVIRONMENT.from_string(QUADLET_TEMPLATE.lstrip("\n"))

    def sections(self) -> List[Tuple[str, List[Tuple[str, str]]]]:
        """
        Flattens the unit into ordered `(section, [(key, value), ...])` pairs.
        """
        names = [name for name in self.unit if name not in TRAILING_SECTIONS]
        names += [name for name in TRAILING_SECTIONS if name in self.unit]

        sections = []
        for name in names:
            entries = []
            for key, value in self.unit[name].items():
                if _is_empty(value):
                    continue
                if isinstance(value, (list, tuple)):
                    entries.extend((key, render_value(item)) for item in value)
                else:
                    entries.append((key, render_value(value)))
            if entries:
                sections.append((name, entries))
        return sections

    def convert(self) -> str:
        """
        Renders the unit file.

        :return: The unit file content, ending with a newline.
        """
        return self.template.render(sections=self.sections())


def stringify(unit: Mapping[str, Mapping[str, Any]]) -> str:
    return QuadletConverter(unit).convert()
