"""
Utilities for interpolating variables in compose documents.
"""
import logging
import re
from typing import Any, Mapping

from ..errors import ComposeError

logger = logging.getLogger(__name__)

# $$ | ${VAR[modifier value]} | $VAR
_PATTERN = re.compile(
    r"\$(?:(\$)|\{([A-Za-z_][A-Za-z0-9_]*)(?:(:?[-+?])([^}]*))?\}|([A-Za-z_][A-Za-z0-9_]*))"
)


class EnvironmentInterpolator:
    """
    Utility for interpolating variables in compose values.
    Supports $VAR, ${VAR}, ${VAR:-default}, ${VAR-default}, ${VAR:+value},
    ${VAR+value}, ${VAR:?error}, ${VAR?error} and the $$ escape.
    """

    @staticmethod
    def interpolate(template: str, context: Mapping[str, str]) -> str:
        """
        Interpolates variables in the template string using the provided context.

        :param template: The string containing $VAR or ${VAR} placeholders.
        :param context: The variables available for interpolation.
        :return: The interpolated string.
        :raises ComposeError: If a `?` variable is unset (or empty, for `:?`).
        """

        def replace(match):
            """
            Internal replacement function for re.sub.
            """
            if match.group(1):
                return "$"
            var_name = match.group(2) or match.group(5)
            modifier = match.group(3)
            alt_value = match.group(4) or ""

            value = context.get(var_name)
            is_set = value is not None
            # a leading colon also treats an empty value as unset
            if modifier and modifier.startswith(":"):
                is_set = bool(value)

            if modifier in (":-", "-"):
                return value if is_set else alt_value
            if modifier in (":+", "+"):
                return alt_value if is_set else ""
            if modifier in (":?", "?"):
                if not is_set:
                    raise ComposeError(alt_value or f"required variable {var_name} is missing a value")
                return value
            if value is None:
                logger.warning("variable %s is not set, defaulting to a blank string", var_name)
                return ""
            return value

        return _PATTERN.sub(replace, template)

    @classmethod
    def interpolate_data(cls, data: Any, context: Mapping[str, str]) -> Any:
        """
        Interpolates every string value of a parsed YAML tree. Mapping keys are left as is.
        """
        if isinstance(data, str):
            return cls.interpolate(data, context)
        if isinstance(data, dict):
            return {key: cls.interpolate_data(value, context) for key, value in data.items()}
        if isinstance(data, list):
            return [cls.interpolate_data(item, context) for item in data]
        return data
