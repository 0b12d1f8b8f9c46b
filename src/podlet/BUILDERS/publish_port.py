"""
PublishPort= from the container's port bindings.
"""
from ..MODELS.quadlet import UnitDefinition, patch_section
from .base import ContainerGeneratorDependencies


def format_binding(container_port: str, host_ip: str, host_port: str) -> str:
    """
    Formats one binding as `[HOST_IP:][HOST_PORT:]CONTAINER_PORT[/PROTOCOL]`.

    `container_port` is the inspect key, e.g. `80/tcp`. The protocol is only
    kept when it is not tcp.
    """
    port, _, protocol = container_port.partition("/")
    if protocol and protocol != "tcp":
        port = f"{port}/{protocol}"
    if host_ip:
        if ":" in host_ip:
            host_ip = f"[{host_ip}]"
        return f"{host_ip}:{host_port}:{port}"
    if host_port:
        return f"{host_port}:{port}"
    return port


def publish_port(deps: ContainerGeneratorDependencies, unit: UnitDefinition) -> UnitDefinition:
    published = [
        format_binding(container_port, binding.host_ip, binding.host_port)
        for container_port, bindings in deps.container.host_config.port_bindings.items()
        for binding in bindings
    ]
    if not published:
        return unit
    return patch_section(unit, "Container", PublishPort=published)
