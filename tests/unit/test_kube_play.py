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
Unit tests for the kube play converter.
"""
import pytest
import yaml
from podlet.CONVERTERS.to_kube_play import KubePlayConverter, parse_duration, sanitize_name
from podlet.PARSERS.compose_parser import ComposeParser
from podlet.errors import ComposeError


def convert(content, name=None):
    compose = ComposeParser().parse_from_string(content)
    return list(yaml.safe_load_all(KubePlayConverter(compose, name).convert()))


class TestKubePlayConverter:
    """Tests for KubePlayConverter."""

    def test_single_service(self):
        """Test a single service with an image and a port becomes a one container pod."""
        documents = convert("services:\n  web:\n    image: nginx\n    ports: ['8080:80']\n")
        assert documents == [{
            "apiVersion": "v1",
            "kind": "Pod",
            "metadata": {"name": "pod"},
            "spec": {
                "containers": [{
                    "name": "web",
                    "image": "nginx",
                    "ports": [{"containerPort": 80, "hostPort": 8080}],
                }],
            },
        }]

    def test_pod_name(self):
        """Test the pod is named after the project unless a name is given."""
        content = "name: shop\nservices:\n  web:\n    image: nginx\n"
        assert convert(content)[0]["metadata"]["name"] == "shop"
        assert convert(content, "store")[0]["metadata"]["name"] == "store"

    def test_container_fields(self):
        """Test command, environment and security settings are carried over."""
        content = """
services:
  app:
    image: app:1
    container_name: my-app
    entrypoint: /entry.sh
    command: ["serve", "--debug"]
    working_dir: /srv
    environment:
      A: 1
      B:
    cap_add: [NET_ADMIN]
    read_only: true
    user: "1000:1000"
    tty: true
"""
        container = convert(content)[0]["spec"]["containers"][0]
        assert container["name"] == "my-app"
        assert container["command"] == ["/entry.sh"]
        assert container["args"] == ["serve", "--debug"]
        assert container["workingDir"] == "/srv"
        assert container["env"] == [{"name": "A", "value": "1"}, {"name": "B"}]
        assert container["securityContext"] == {
            "readOnlyRootFilesystem": True,
            "capabilities": {"add": ["NET_ADMIN"]},
            "runAsUser": 1000,
            "runAsGroup": 1000,
        }
        assert container["tty"] is True

    def test_named_volumes_become_claims(self):
        """Test named volumes are backed by one claim each, shared between services."""
        content = """
services:
  db:
    image: postgres
    volumes: ['data:/var/lib/postgresql/data']
  backup:
    image: busybox
    volumes: ['data:/backup:ro']
volumes:
  data:
    driver_opts:
      type: nfs
      o: addr=10.0.0.1
"""
        pod, claim = convert(content)
        assert pod["spec"]["volumes"] == [{"name": "data", "persistentVolumeClaim": {"claimName": "data"}}]
        assert pod["spec"]["containers"][1]["volumeMounts"] == [
            {"name": "data", "mountPath": "/backup", "readOnly": True},
        ]
        assert claim["kind"] == "PersistentVolumeClaim"
        assert claim["metadata"] == {
            "name": "data",
            "annotations": {"volume.podman.io/type": "nfs", "volume.podman.io/mount-options": "addr=10.0.0.1"},
        }
        assert claim["spec"]["accessModes"] == ["ReadWriteOnce"]

    def test_external_volume_has_no_claim(self):
        content = "services:\n  db:\n    image: pg\n    volumes: ['data:/d']\nvolumes:\n  data:\n    external: true\n"
        assert len(convert(content)) == 1

    def test_bind_and_tmpfs_mounts(self):
        """Test bind mounts use host paths and tmpfs uses memory backed directories."""
        content = "services:\n  web:\n    image: nginx\n    volumes: ['./html:/usr/share/nginx/html']\n    tmpfs: /run\n"
        spec = convert(content)[0]["spec"]
        assert spec["volumes"] == [
            {"name": "html", "hostPath": {"path": "./html"}},
            {"name": "web-tmpfs-run", "emptyDir": {"medium": "Memory"}},
        ]
        assert spec["containers"][0]["volumeMounts"] == [
            {"name": "html", "mountPath": "/usr/share/nginx/html"},
            {"name": "web-tmpfs-run", "mountPath": "/run"},
        ]

    @pytest.mark.parametrize("policies,expected", [
        (["always", "unless-stopped"], "Always"),
        (["on-failure:3", None], "OnFailure"),
        (["no"], "Never"),
        (["always", "no"], None),
    ])
    def test_restart_policy(self, policies, expected):
        """Test the pod restart policy is only set when all services agree."""
        services = {f"s{i}": {"image": "busybox", **({"restart": p} if p else {})} for i, p in enumerate(policies)}
        spec = convert(yaml.safe_dump({"services": services}))[0]["spec"]
        assert spec.get("restartPolicy") == expected

    def test_host_aliases(self):
        content = "services:\n  web:\n    image: nginx\n    extra_hosts: ['db:10.0.0.2', 'cache=10.0.0.2']\n"
        spec = convert(content)[0]["spec"]
        assert spec["hostAliases"] == [{"ip": "10.0.0.2", "hostnames": ["db", "cache"]}]

    def test_healthcheck_probe(self):
        content = """
services:
  web:
    image: nginx
    healthcheck:
      test: curl -f http://localhost
      interval: 1m30s
      timeout: 500ms
      retries: 3
"""
        probe = convert(content)[0]["spec"]["containers"][0]["livenessProbe"]
        assert probe == {
            "exec": {"command": ["/bin/sh", "-c", "curl -f http://localhost"]},
            "periodSeconds": 90,
            "timeoutSeconds": 1,
            "failureThreshold": 3,
        }

    def test_unsupported_keys_are_dropped(self):
        """Test keys without a pod counterpart do not fail the conversion."""
        content = "services:\n  web:\n    image: nginx\n    depends_on: [db]\n    networks: [front]\n    build: .\n"
        container = convert(content)[0]["spec"]["containers"][0]
        assert container == {"name": "web", "image": "nginx"}

    def test_missing_image(self):
        with pytest.raises(ComposeError, match="web"):
            convert("services:\n  web:\n    build: .\n")

    def test_deterministic(self):
        content = "services:\n  a:\n    image: x\n    volumes: ['v:/v']\n  b:\n    image: y\n"
        compose = ComposeParser().parse_from_string(content)
        converter = KubePlayConverter(compose)
        assert converter.convert() == converter.convert()


@pytest.mark.parametrize("value,expected", [("10", 10), ("1m30s", 90), ("1.5s", 2), ("250ms", 1), ("1h", 3600)])
def test_parse_duration(value, expected):
    assert parse_duration(value) == expected


def test_parse_duration_invalid():
    with pytest.raises(ComposeError):
        parse_duration("soon")


@pytest.mark.parametrize("value,expected", [("./html", "html"), ("My_Data", "my-data"), ("///", "volume")])
def test_sanitize_name(value, expected):
    assert sanitize_name(value) == expected


def test_unquoted_short_port_projection():
    documents = convert("services:\n  ssh:\n    image: sshd\n    ports: [2222:22]\n")
    assert documents[0]["spec"]["containers"][0]["ports"] == [{"containerPort": 22, "hostPort": 2222}]
