"""
Health*= keys when the container defines its own health check.
"""
import json
import shlex

from ..MODELS.quadlet import UnitDefinition, patch_section
from .base import ContainerGeneratorDependencies

_NS_PER_SECOND = 1_000_000_000
_NS_PER_MILLISECOND = 1_000_000


def format_duration(nanoseconds: int) -> str:
    """Renders an inspect duration (nanoseconds) as `30s`, `500ms` or `1500us`."""
    if nanoseconds % _NS_PER_SECOND == 0:
        return f"{nanoseconds // _NS_PER_SECOND}s"
    if nanoseconds % _NS_PER_MILLISECOND == 0:
        return f"{nanoseconds // _NS_PER_MILLISECOND}ms"
    if nanoseconds % 1000 == 0:
        return f"{nanoseconds // 1000}us"
    return f"{nanoseconds}ns"


def format_health_cmd(test) -> str:
    """
    Converts an inspect `Test` array to the value of HealthCmd=.

    `CMD-SHELL` commands are kept as a shell string, `CMD` arguments become a
    JSON array, and `NONE` disables the check.
    """
    kind, args = test[0], list(test[1:])
    if kind == "NONE":
        return "none"
    if kind == "CMD-SHELL":
        return " ".join(args)
    if kind == "CMD":
        return json.dumps(args)
    return shlex.join(test)


def health_check(deps: ContainerGeneratorDependencies, unit: UnitDefinition) -> UnitDefinition:
    check = deps.container.config.healthcheck
    if check is None or not check.test or check == deps.image.config.healthcheck:
        return unit

    values = {"HealthCmd": format_health_cmd(check.test)}
    if check.interval:
        values["HealthInterval"] = format_duration(check.interval)
    if check.timeout:
        values["HealthTimeout"] = format_duration(check.timeout)
    if check.start_period:
        values["HealthStartPeriod"] = format_duration(check.start_period)
    if check.retries:
        values["HealthRetries"] = check.retries
    return patch_section(unit, "Container", **values)
