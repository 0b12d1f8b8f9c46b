"""
Unit definitions accumulated by the generators before they are rendered.

A unit definition is a mapping of section name to a mapping of Quadlet key to
value. Values are strings, ints, booleans or lists of strings; a list renders
as one line per element. See podman-systemd.unit(5) for the meaning of keys.
"""
from typing import Any, Dict, List, Mapping, TypedDict, Union

QuadletValue = Union[str, int, bool, List[str]]
QuadletSection = Dict[str, QuadletValue]
UnitDefinition = Dict[str, QuadletSection]

# Sections rendered after the resource section(s), in this order.
TRAILING_SECTIONS = ("Service", "Install")


class ServiceQuadlet(TypedDict, total=False):
    Restart: str


class InstallQuadlet(TypedDict, total=False):
    WantedBy: str


class ContainerSection(TypedDict, total=False):
    AddCapability: List[str]
    AddHost: List[str]
    Annotation: List[str]
    ContainerName: str
    DropCapability: List[str]
    Entrypoint: str
    Environment: List[str]
    Exec: str
    HealthCmd: str
    HealthInterval: str
    HealthRetries: int
    HealthStartPeriod: str
    HealthTimeout: str
    Image: str
    Label: List[str]
    Mount: List[str]
    PublishPort: List[str]
    ReadOnly: bool


class ContainerQuadlet(TypedDict, total=False):
    Container: ContainerSection
    Service: ServiceQuadlet
    Install: InstallQuadlet


class ImageSection(TypedDict, total=False):
    Image: str


class ImageQuadlet(TypedDict, total=False):
    Image: ImageSection
    Service: ServiceQuadlet
    Install: InstallQuadlet


def patch_section(unit: Mapping[str, Mapping[str, Any]], section: str, **values: Any) -> UnitDefinition:
    """
    Returns a copy of `unit` where the given keys of `section` are set.

    Keys not named in `values` are carried over untouched, the section is
    created (after the existing ones) when missing, and `unit` is not modified.
    """
    patched = {name: dict(entries) for name, entries in unit.items()}
    patched.setdefault(section, {}).update(values)
    return patched
