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
Converter projecting a compose document into a kube-play manifest.

Services become containers of a single pod and named volumes become
persistent volume claims. Compose keys that have no counterpart in a pod
manifest are dropped, never rejected.
"""
import logging
import math
import re
from typing import Any, Dict, List, Optional
import yaml
from ..MODELS.compose_file import ComposeFile, ComposeHealthcheck, ComposeService, ComposeServiceVolume
from ..errors import ComposeError

logger = logging.getLogger(__name__)

DEFAULT_POD_NAME = "pod"

RESTART_POLICIES = {
    "always": "Always",
    "unless-stopped": "Always",
    "on-failure": "OnFailure",
    "no": "Never",
}

# top-level volume driver_opts understood by podman kube play
VOLUME_OPTION_ANNOTATIONS = {
    "type": "volume.podman.io/type",
    "device": "volume.podman.io/device",
    "o": "volume.podman.io/mount-options",
    "uid": "volume.podman.io/uid",
    "gid": "volume.podman.io/gid",
}

_DURATION = re.compile(r"(\d+(?:\.\d+)?)(us|ms|s|m|h)")
_DURATION_UNITS = {"us": 1e-6, "ms": 1e-3, "s": 1, "m": 60, "h": 3600}


def sanitize_name(value: str, fallback: str = "volume") -> str:
    """
    Turns an arbitrary string into a DNS-1123 label usable as a pod volume name.
    """
    name = re.sub(r"[^a-z0-9-]+", "-", value.lower())
    name = re.sub(r"-+", "-", name).strip("-")
    return name or fallback


def parse_duration(value: str) -> int:
    """
    Converts a compose duration (`1m30s`, `500ms`, `10`) into whole seconds, rounding up.
    """
    value = value.strip()
    if re.fullmatch(r"\d+(?:\.\d+)?", value):
        return math.ceil(float(value))
    matches = _DURATION.findall(value)
    if not matches or "".join(n + u for n, u in matches) != value:
        raise ComposeError(f"invalid duration: {value}")
    return math.ceil(sum(float(n) * _DURATION_UNITS[u] for n, u in matches))


class KubePlayConverter:
    """
    Converts a compose document into a kube-play manifest (a Pod followed by its PersistentVolumeClaims).
    """

    def __init__(self, compose: ComposeFile, name: Optional[str] = None):
        """
        Initializes the kube play converter.

        :param compose: The parsed compose document.
        :param name: Name of the pod; defaults to the compose project name.
        """
        self.compose = compose
        self.name = name or compose.name or DEFAULT_POD_NAME
        self._volumes: Dict[str, Dict[str, Any]] = {}
        self._volume_names: Dict[tuple, str] = {}
        self._claims: List[str] = []

    def convert(self) -> str:
        """
        Generates the manifest.

        :return: Multi-document YAML text.
        """
        self._volumes, self._volume_names, self._claims = {}, {}, []

        containers = [self._container(name, svc) for name, svc in self.compose.services.items()]

        spec: Dict[str, Any] = {"containers": containers}
        host_aliases = self._host_aliases()
        if host_aliases:
            spec["hostAliases"] = host_aliases
        hostname = self._hostname()
        if hostname:
            spec["hostname"] = hostname
        restart_policy = self._restart_policy()
        if restart_policy:
            spec["restartPolicy"] = restart_policy
        if self._volumes:
            spec["volumes"] = list(self._volumes.values())

        pod = {
            "apiVersion": "v1",
            "kind": "Pod",
            "metadata": {"name": self.name},
            "spec": spec,
        }
        documents = [pod] + [self._claim(claim) for claim in self._claims]
        return yaml.safe_dump_all(documents, sort_keys=False, default_flow_style=False)

    def _container(self, name: str, svc: ComposeService) -> Dict[str, Any]:
        """
        Projects one service into a pod container.
        """
        if not svc.image:
            raise ComposeError(f"service {name} has no image")

        container: Dict[str, Any] = {"name": svc.container_name or name, "image": svc.image}
        if svc.entrypoint:
            container["command"] = list(svc.entrypoint)
        if svc.command:
            container["args"] = list(svc.command)
        if svc.working_dir:
            container["workingDir"] = svc.working_dir
        if svc.environment:
            container["env"] = [
                {"name": key} if value is None else {"name": key, "value": value}
                for key, value in svc.environment.items()
            ]
        if svc.ports:
            container["ports"] = [self._port(port) for port in svc.ports]

        mounts = [self._volume_mount(name, volume) for volume in svc.volumes]
        mounts += [self._tmpfs_mount(name, entry) for entry in svc.tmpfs]
        mounts = [mount for mount in mounts if mount]
        if mounts:
            container["volumeMounts"] = mounts

        security_context = self._security_context(name, svc)
        if security_context:
            container["securityContext"] = security_context
        if svc.tty:
            container["tty"] = True
        if svc.stdin_open:
            container["stdin"] = True

        probe = self._probe(svc.healthcheck)
        if probe:
            container["livenessProbe"] = probe
        return container

    @staticmethod
    def _port(port) -> Dict[str, Any]:
        mapping: Dict[str, Any] = {"containerPort": port.target}
        if port.published is not None:
            mapping["hostPort"] = port.published
        if port.host_ip:
            mapping["hostIP"] = port.host_ip
        if port.protocol.lower() != "tcp":
            mapping["protocol"] = port.protocol.upper()
        return mapping

    def _add_volume(self, key: tuple, base_name: str, source: Dict[str, Any]) -> str:
        """
        Registers a pod volume once per source and returns its name.
        """
        if key in self._volume_names:
            return self._volume_names[key]
        name, counter = base_name, 1
        while name in self._volumes:
            counter += 1
            name = f"{base_name}-{counter}"
        self._volumes[name] = {"name": name, **source}
        self._volume_names[key] = name
        return name

    def _volume_mount(self, service: str, volume: ComposeServiceVolume) -> Optional[Dict[str, Any]]:
        if volume.type == "volume" and volume.source:
            top_level = self.compose.volumes.get(volume.source, {})
            claim = top_level.get("name") or volume.source
            if not top_level.get("external") and claim not in self._claims:
                self._claims.append(claim)
            name = self._add_volume(
                ("volume", volume.source),
                sanitize_name(volume.source),
                {"persistentVolumeClaim": {"claimName": claim}},
            )
        elif volume.type == "volume":
            name = self._add_volume(
                ("anonymous", service, volume.target),
                sanitize_name(f"{service}-{volume.target}"),
                {"emptyDir": {}},
            )
        elif volume.type == "bind" and volume.source:
            name = self._add_volume(
                ("bind", volume.source),
                sanitize_name(volume.source),
                {"hostPath": {"path": volume.source}},
            )
        elif volume.type == "tmpfs":
            return self._tmpfs_mount(service, volume.target)
        else:
            logger.debug("service %s: dropping %s mount on %s", service, volume.type, volume.target)
            return None

        mount: Dict[str, Any] = {"name": name, "mountPath": volume.target}
        if volume.read_only:
            mount["readOnly"] = True
        return mount

    def _tmpfs_mount(self, service: str, entry: str) -> Dict[str, Any]:
        target = entry.split(":", 1)[0]
        name = self._add_volume(
            ("tmpfs", service, target),
            sanitize_name(f"{service}-tmpfs-{target}"),
            {"emptyDir": {"medium": "Memory"}},
        )
        return {"name": name, "mountPath": target}

    @staticmethod
    def _security_context(service: str, svc: ComposeService) -> Dict[str, Any]:
        context: Dict[str, Any] = {}
        if svc.privileged:
            context["privileged"] = True
        if svc.read_only:
            context["readOnlyRootFilesystem"] = True
        capabilities = {}
        if svc.cap_add:
            capabilities["add"] = list(svc.cap_add)
        if svc.cap_drop:
            capabilities["drop"] = list(svc.cap_drop)
        if capabilities:
            context["capabilities"] = capabilities
        if svc.user:
            user, _, group = svc.user.partition(":")
            if user.isdigit() and (not group or group.isdigit()):
                context["runAsUser"] = int(user)
                if group:
                    context["runAsGroup"] = int(group)
            else:
                logger.debug("service %s: dropping non numeric user %s", service, svc.user)
        return context

    @staticmethod
    def _probe(healthcheck: Optional[ComposeHealthcheck]) -> Optional[Dict[str, Any]]:
        """
        Maps a compose healthcheck to a liveness probe, which kube play turns back into a health check.
        """
        if healthcheck is None or healthcheck.disable or not healthcheck.test:
            return None
        kind, args = healthcheck.test[0], healthcheck.test[1:]
        if kind == "NONE":
            return None
        if kind == "CMD-SHELL":
            command = ["/bin/sh", "-c", " ".join(args)]
        elif kind == "CMD":
            command = list(args)
        else:
            command = list(healthcheck.test)

        probe: Dict[str, Any] = {"exec": {"command": command}}
        if healthcheck.interval:
            probe["periodSeconds"] = parse_duration(healthcheck.interval)
        if healthcheck.timeout:
            probe["timeoutSeconds"] = parse_duration(healthcheck.timeout)
        if healthcheck.start_period:
            probe["initialDelaySeconds"] = parse_duration(healthcheck.start_period)
        if healthcheck.retries:
            probe["failureThreshold"] = healthcheck.retries
        return probe

    def _host_aliases(self) -> List[Dict[str, Any]]:
        aliases: Dict[str, List[str]] = {}
        for svc in self.compose.services.values():
            for entry in svc.extra_hosts:
                host, _, address = entry.partition(":")
                hostnames = aliases.setdefault(address, [])
                if host not in hostnames:
                    hostnames.append(host)
        return [{"ip": address, "hostnames": hostnames} for address, hostnames in aliases.items()]

    def _hostname(self) -> Optional[str]:
        hostnames = [svc.hostname for svc in self.compose.services.values() if svc.hostname]
        if len(set(hostnames)) > 1:
            logger.debug("pod %s: several hostnames, keeping %s", self.name, hostnames[0])
        return hostnames[0] if hostnames else None

    def _restart_policy(self) -> Optional[str]:
        """
        A pod has a single restart policy, so it is only set when all services agree.
        """
        policies = []
        for name, svc in self.compose.services.items():
            if not svc.restart:
                continue
            policy = RESTART_POLICIES.get(svc.restart.split(":", 1)[0])
            if policy is None:
                logger.debug("service %s: unknown restart policy %s", name, svc.restart)
                continue
            policies.append(policy)
        if len(set(policies)) > 1:
            logger.warning("pod %s: services use different restart policies, leaving it unset", self.name)
            return None
        return policies[0] if policies else None

    def _claim(self, claim: str) -> Dict[str, Any]:
        metadata: Dict[str, Any] = {"name": claim}
        annotations = self._claim_annotations(claim)
        if annotations:
            metadata["annotations"] = annotations
        return {
            "apiVersion": "v1",
            "kind": "PersistentVolumeClaim",
            "metadata": metadata,
            "spec": {
                "accessModes": ["ReadWriteOnce"],
                "resources": {"requests": {"storage": "1Gi"}},
            },
        }

    def _claim_annotations(self, claim: str) -> Dict[str, str]:
        top_level = next(
            (spec for key, spec in self.compose.volumes.items() if (spec.get("name") or key) == claim),
            {},
        )
        annotations = {}
        if top_level.get("driver"):
            annotations["volume.podman.io/driver"] = str(top_level["driver"])
        for option, value in (top_level.get("driver_opts") or {}).items():
            if option in VOLUME_OPTION_ANNOTATIONS:
                annotations[VOLUME_OPTION_ANNOTATIONS[option]] = str(value)
        return annotations
