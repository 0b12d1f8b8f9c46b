"""
Models for a parsed Compose document.

Compose accepts several spellings for most service keys (strings or lists,
mappings or `KEY=VALUE` lists, short or long port and volume syntax). The
validators below fold every spelling into a single long form so that the
converters only deal with one shape. Keys that are not modelled are kept in
`model_extra` and ignored downstream.
"""
import shlex
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from ..errors import ComposeError


def _scalar(value: Any) -> Optional[str]:
    """
    Renders a YAML scalar the way Compose reads it (booleans lowercase).
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _split_range(value: str) -> List[int]:
    """
    Expands `8000` or `8000-8002` into a list of ports.
    """
    if not value:
        return []
    if "-" in value:
        start, end = value.split("-", 1)
        return list(range(int(start), int(end) + 1))
    return [int(value)]


def parse_port(value: Any) -> List[Dict[str, Any]]:
    """
    Parses a short-syntax port (`[HOST_IP:][HOST_PORT:]CONTAINER_PORT[/PROTOCOL]`).

    Port ranges expand into one entry per port.

    :param value: The port as written in the document (string or int).
    :return: Long-syntax port mappings.
    """
    if isinstance(value, int):
        return [{"target": value}]

    spec = str(value).strip()
    protocol = "tcp"
    if "/" in spec:
        spec, protocol = spec.rsplit("/", 1)

    host_ip = None
    if spec.startswith("["):
        # [::1]:8080:80
        end = spec.index("]")
        host_ip = spec[1:end]
        spec = spec[end + 2:]
    parts = spec.split(":")
    if len(parts) > 3:
        raise ComposeError(f"invalid port mapping: {value}")
    if len(parts) == 3:
        host_ip, published, target = parts
    elif len(parts) == 2:
        published, target = parts
    else:
        published, target = "", parts[0]

    try:
        targets = _split_range(target)
        hosts = _split_range(published)
    except ValueError:
        raise ComposeError(f"invalid port mapping: {value}") from None
    if hosts and len(hosts) != len(targets):
        raise ComposeError(f"invalid port mapping: {value}")

    ports = []
    for index, container_port in enumerate(targets):
        port = {"target": container_port, "protocol": protocol}
        if hosts:
            port["published"] = hosts[index]
        if host_ip:
            port["host_ip"] = host_ip
        ports.append(port)
    return ports


def _is_path(source: str) -> bool:
    return source.startswith(("/", ".", "~"))


def parse_volume(value: str) -> Dict[str, Any]:
    """
    Parses a short-syntax service volume (`[SOURCE:]TARGET[:MODE]`).

    :param value: The volume as written in the document.
    :return: A long-syntax volume mapping.
    """
    parts = value.split(":")
    if len(parts) == 1:
        return {"type": "volume", "target": parts[0]}

    source, target = parts[0], parts[1]
    mode = parts[2].split(",") if len(parts) > 2 else []
    return {
        "type": "bind" if _is_path(source) else "volume",
        "source": source,
        "target": target,
        "read_only": "ro" in mode,
    }


class ComposePort(BaseModel):
    """
    A port published by a service.
    """
    target: int = Field(ge=1, le=65535)
    published: Optional[int] = Field(default=None, ge=1, le=65535)
    host_ip: Optional[str] = None
    protocol: str = "tcp"

    model_config = ConfigDict(extra="ignore")

    @field_validator("published", mode="before")
    @classmethod
    def _normalize_published(cls, value):
        if value in (None, ""):
            return None
        return value


class ComposeServiceVolume(BaseModel):
    """
    A filesystem mounted into a service.
    """
    type: str = "volume"
    source: Optional[str] = None
    target: str
    read_only: bool = False

    model_config = ConfigDict(extra="ignore")


class ComposeHealthcheck(BaseModel):
    test: List[str] = []
    interval: Optional[str] = None
    timeout: Optional[str] = None
    start_period: Optional[str] = None
    retries: Optional[int] = None
    disable: bool = False

    model_config = ConfigDict(extra="ignore")

    @field_validator("test", mode="before")
    @classmethod
    def _normalize_test(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return ["CMD-SHELL", value]
        return [str(item) for item in value]

    @field_validator("interval", "timeout", "start_period", mode="before")
    @classmethod
    def _normalize_duration(cls, value):
        return _scalar(value)


class ComposeService(BaseModel):
    """
    A single service of a compose document, in long form.
    """
    image: Optional[str] = None
    container_name: Optional[str] = None
    command: Optional[List[str]] = None
    entrypoint: Optional[List[str]] = None
    environment: Dict[str, Optional[str]] = {}
    ports: List[ComposePort] = []
    volumes: List[ComposeServiceVolume] = []
    tmpfs: List[str] = []
    working_dir: Optional[str] = None
    user: Optional[str] = None
    restart: Optional[str] = None
    hostname: Optional[str] = None
    extra_hosts: List[str] = []
    cap_add: List[str] = []
    cap_drop: List[str] = []
    privileged: bool = False
    read_only: bool = False
    tty: bool = False
    stdin_open: bool = False
    healthcheck: Optional[ComposeHealthcheck] = None
    labels: Dict[str, str] = {}

    model_config = ConfigDict(extra="allow")

    @field_validator("command", "entrypoint", mode="before")
    @classmethod
    def _normalize_command(cls, value):
        if value is None:
            return None
        if isinstance(value, str):
            return shlex.split(value)
        return [str(item) for item in value]

    @field_validator("environment", mode="before")
    @classmethod
    def _normalize_environment(cls, value):
        if not value:
            return {}
        if isinstance(value, dict):
            return {key: _scalar(val) for key, val in value.items()}
        environment = {}
        for entry in value:
            if "=" in entry:
                key, val = entry.split("=", 1)
                environment[key] = val
            else:
                environment[entry] = None
        return environment

    @field_validator("ports", mode="before")
    @classmethod
    def _normalize_ports(cls, value):
        ports = []
        for entry in value or []:
            if isinstance(entry, dict):
                ports.append(entry)
            else:
                ports.extend(parse_port(entry))
        return ports

    @field_validator("volumes", mode="before")
    @classmethod
    def _normalize_volumes(cls, value):
        return [entry if isinstance(entry, dict) else parse_volume(entry) for entry in value or []]

    @field_validator("tmpfs", "cap_add", "cap_drop", mode="before")
    @classmethod
    def _normalize_list(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return list(value)

    @field_validator("extra_hosts", mode="before")
    @classmethod
    def _normalize_extra_hosts(cls, value):
        if not value:
            return []
        if isinstance(value, dict):
            return [f"{host}:{address}" for host, address in value.items()]
        hosts = []
        for entry in value:
            host, sep, address = entry.partition("=")
            hosts.append(f"{host}:{address}" if sep else entry)
        return hosts

    @field_validator("labels", mode="before")
    @classmethod
    def _normalize_labels(cls, value):
        if not value:
            return {}
        if isinstance(value, dict):
            return {key: _scalar(val) or "" for key, val in value.items()}
        labels = {}
        for entry in value:
            key, _, val = entry.partition("=")
            labels[key] = val
        return labels

    @field_validator("user", "working_dir", "hostname", "restart", mode="before")
    @classmethod
    def _normalize_str(cls, value):
        return _scalar(value)


class ComposeFile(BaseModel):
    """
    A parsed compose document.
    """
    name: Optional[str] = None
    services: Dict[str, ComposeService] = {}
    volumes: Dict[str, Dict[str, Any]] = {}
    networks: Dict[str, Dict[str, Any]] = {}

    model_config = ConfigDict(extra="allow")

    @field_validator("services", mode="before")
    @classmethod
    def _normalize_services(cls, value):
        if isinstance(value, dict):
            return {name: spec or {} for name, spec in value.items()}
        return value or {}

    @field_validator("volumes", "networks", mode="before")
    @classmethod
    def _normalize_top_level(cls, value):
        if isinstance(value, dict):
            return {name: spec or {} for name, spec in value.items()}
        return value or {}
