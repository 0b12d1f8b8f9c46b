"""
Models for the container and image inspect records reported by the runtime.

Field names follow the PascalCase keys of `podman inspect` and of the
Docker-compatible API. Only the fields the generators read are declared,
anything else in the record is ignored.
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_pascal


def _as_list(value: Any) -> List[str]:
    """
    Normalizes a null, a single string or a sequence into a list of strings.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


class InspectModel(BaseModel):
    """
    Base for read-only records decoded from inspect JSON.
    """
    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class HealthConfig(InspectModel):
    """
    Health check settings. Durations are expressed in nanoseconds.
    """
    test: List[str] = []
    interval: int = 0
    timeout: int = 0
    start_period: int = 0
    retries: int = 0

    @field_validator("test", mode="before")
    @classmethod
    def _normalize_test(cls, value):
        return _as_list(value)

    @field_validator("interval", "timeout", "start_period", "retries", mode="before")
    @classmethod
    def _normalize_number(cls, value):
        return value or 0


class InspectConfig(InspectModel):
    """
    The `Config` block shared by container and image records.
    """
    env: List[str] = []
    cmd: List[str] = []
    entrypoint: List[str] = []
    image: str = ""
    labels: Dict[str, str] = {}
    annotations: Dict[str, str] = {}
    healthcheck: Optional[HealthConfig] = None

    @field_validator("env", "cmd", "entrypoint", mode="before")
    @classmethod
    def _normalize_list(cls, value):
        return _as_list(value)

    @field_validator("labels", "annotations", mode="before")
    @classmethod
    def _normalize_mapping(cls, value):
        return value or {}

    @field_validator("image", mode="before")
    @classmethod
    def _normalize_image(cls, value):
        return value or ""


class PortBinding(InspectModel):
    host_ip: str = ""
    host_port: str = ""

    @field_validator("host_ip", "host_port", mode="before")
    @classmethod
    def _normalize_str(cls, value):
        return "" if value is None else str(value)


class RestartPolicy(InspectModel):
    name: str = ""

    @field_validator("name", mode="before")
    @classmethod
    def _normalize_name(cls, value):
        return value or ""


class HostConfig(InspectModel):
    extra_hosts: List[str] = []
    cap_add: List[str] = []
    cap_drop: List[str] = []
    port_bindings: Dict[str, List[PortBinding]] = {}
    readonly_rootfs: bool = False
    restart_policy: RestartPolicy = Field(default_factory=RestartPolicy)

    @field_validator("extra_hosts", "cap_add", "cap_drop", mode="before")
    @classmethod
    def _normalize_list(cls, value):
        return _as_list(value)

    @field_validator("port_bindings", mode="before")
    @classmethod
    def _normalize_bindings(cls, value):
        # unpublished exposed ports are reported with a null binding list
        return {port: bindings or [] for port, bindings in (value or {}).items()}

    @field_validator("readonly_rootfs", mode="before")
    @classmethod
    def _normalize_bool(cls, value):
        return bool(value)

    @field_validator("restart_policy", mode="before")
    @classmethod
    def _normalize_policy(cls, value):
        return value or {}


class Mount(InspectModel):
    type: str = ""
    name: str = ""
    source: str = ""
    destination: str = ""
    rw: bool = Field(default=True, alias="RW")

    @field_validator("type", "name", "source", "destination", mode="before")
    @classmethod
    def _normalize_str(cls, value):
        return value or ""


class ContainerInspectInfo(InspectModel):
    """
    Snapshot of a container as returned by `podman container inspect`.
    """
    id: str
    name: str = ""
    image: str = ""
    image_name: str = ""
    config: InspectConfig = Field(default_factory=InspectConfig)
    host_config: HostConfig = Field(default_factory=HostConfig)
    mounts: List[Mount] = []

    @field_validator("name", "image", "image_name", mode="before")
    @classmethod
    def _normalize_str(cls, value):
        return value or ""

    @field_validator("config", "host_config", mode="before")
    @classmethod
    def _normalize_block(cls, value):
        return value or {}

    @field_validator("mounts", mode="before")
    @classmethod
    def _normalize_mounts(cls, value):
        return value or []


class ImageInspectInfo(InspectModel):
    """
    Snapshot of an image as returned by `podman image inspect`.
    """
    id: str
    repo_tags: List[str] = []
    repo_digests: List[str] = []
    config: InspectConfig = Field(default_factory=InspectConfig)
    annotations: Dict[str, str] = {}

    @field_validator("repo_tags", "repo_digests", mode="before")
    @classmethod
    def _normalize_list(cls, value):
        return _as_list(value)

    @field_validator("config", "annotations", mode="before")
    @classmethod
    def _normalize_block(cls, value):
        return value or {}
