import yaml
import pytest
from pydantic import ValidationError
from podlet.PARSERS.compose_parser import ComposeParser
from podlet.MODELS.compose_file import parse_port, parse_volume
from podlet.errors import ComposeError


def test_parse(tmp_path):
    compose_content = {
        'version': '3.8',
        'services': {
            'web': {
                'image': 'nginx:latest',
                'ports': ['80:80'],
                'environment': {
                    'DEBUG': True
                },
                'restart': 'always'
            },
            'db': {
                'image': 'postgres:13',
                'volumes': ['db_data:/var/lib/postgresql/data']
            }
        },
        'volumes': {
            'db_data': {}
        }
    }

    compose_file = tmp_path / "compose.yaml"
    with open(compose_file, 'w') as f:
        yaml.dump(compose_content, f)

    parser = ComposeParser()
    config = parser.parse(str(compose_file))

    assert 'web' in config.services
    assert 'db' in config.services
    assert config.services['web'].image == 'nginx:latest'
    assert config.services['web'].ports[0].target == 80
    assert config.services['web'].ports[0].published == 80
    assert config.services['web'].environment['DEBUG'] == 'true'
    assert config.services['web'].restart == 'always'

    assert 'db_data' in config.volumes
    assert config.services['db'].volumes[0].type == 'volume'
    assert config.services['db'].volumes[0].source == 'db_data'
    assert config.services['db'].volumes[0].target == '/var/lib/postgresql/data'


def test_short_and_long_syntax():
    content = """
services:
  app:
    image: app
    command: serve --port "8000"
    environment:
      - A=1
      - B
    ports:
      - "127.0.0.1:8000-8001:8000-8001/udp"
      - target: 9000
        published: "9001"
    volumes:
      - ./src:/app:ro
      - /cache
      - type: tmpfs
        target: /run
    extra_hosts:
      - "db=10.0.0.2"
      - "cache:10.0.0.3"
    tmpfs: /tmp
    user: 1000
"""
    app = ComposeParser().parse_from_string(content).services['app']
    assert app.command == ['serve', '--port', '8000']
    assert app.environment == {'A': '1', 'B': None}
    assert [(p.host_ip, p.published, p.target, p.protocol) for p in app.ports] == [
        ('127.0.0.1', 8000, 8000, 'udp'),
        ('127.0.0.1', 8001, 8001, 'udp'),
        (None, 9001, 9000, 'tcp'),
    ]
    assert [(v.type, v.source, v.target, v.read_only) for v in app.volumes] == [
        ('bind', './src', '/app', True),
        ('volume', None, '/cache', False),
        ('tmpfs', None, '/run', False),
    ]
    assert app.extra_hosts == ['db:10.0.0.2', 'cache:10.0.0.3']
    assert app.tmpfs == ['/tmp']
    assert app.user == '1000'


def test_unknown_keys_are_kept_aside():
    compose = ComposeParser().parse_from_string(
        "services:\n  web:\n    image: nginx\n    depends_on: [db]\n    x-custom: 1\n"
    )
    assert compose.services['web'].model_extra == {'depends_on': ['db'], 'x-custom': 1}


def test_interpolation():
    content = "services:\n  web:\n    image: nginx:${TAG:-latest}\n    environment:\n      URL: http://$HOST\n"
    compose = ComposeParser({'HOST': 'example.com'}).parse_from_string(content)
    assert compose.services['web'].image == 'nginx:latest'
    assert compose.services['web'].environment['URL'] == 'http://example.com'


def test_empty_document():
    assert ComposeParser().parse_from_string("").services == {}


@pytest.mark.parametrize("content", ["- a\n- b\n", "just text", "services: [web]\n", "services:\n  web: nginx\n"])
def test_not_a_compose_document(content):
    with pytest.raises(ComposeError):
        ComposeParser().parse_from_string(content)


def test_invalid_yaml():
    with pytest.raises(yaml.YAMLError):
        ComposeParser().parse_from_string("services: [unclosed")


def test_invalid_port():
    with pytest.raises(ValidationError):
        ComposeParser().parse_from_string("services:\n  web:\n    ports: ['a:b']\n")


@pytest.mark.parametrize("value,expected", [
    (80, [{'target': 80}]),
    ("8080:80", [{'target': 80, 'protocol': 'tcp', 'published': 8080}]),
    ("[::1]:53:53/udp", [{'target': 53, 'protocol': 'udp', 'published': 53, 'host_ip': '::1'}]),
    ("9000", [{'target': 9000, 'protocol': 'tcp'}]),
])
def test_parse_port(value, expected):
    assert parse_port(value) == expected


@pytest.mark.parametrize("value", ["8000-8002:80-81", "8000-8001:80", "8000:80-81"])
def test_parse_port_range_mismatch(value):
    with pytest.raises(ComposeError):
        parse_port(value)


@pytest.mark.parametrize("value,expected", [
    ("data:/data", {'type': 'volume', 'source': 'data', 'target': '/data', 'read_only': False}),
    ("~/conf:/etc/app:ro,z", {'type': 'bind', 'source': '~/conf', 'target': '/etc/app', 'read_only': True}),
    ("/scratch", {'type': 'volume', 'target': '/scratch'}),
])
def test_parse_volume(value, expected):
    assert parse_volume(value) == expected


def test_unquoted_short_port():
    """2222:22 would be a base 60 integer under YAML 1.1 rules"""
    compose = ComposeParser().parse_from_string("services:\n  ssh:\n    image: sshd\n    ports:\n      - 2222:22\n")
    port = compose.services['ssh'].ports[0]
    assert (port.published, port.target) == (2222, 22)


def test_plain_integers_still_parse():
    compose = ComposeParser().parse_from_string(
        "services:\n  web:\n    image: nginx\n    ports:\n      - 8080\n    healthcheck:\n      retries: 3\n"
    )
    assert compose.services['web'].ports[0].target == 8080
    assert compose.services['web'].healthcheck.retries == 3


@pytest.mark.parametrize("port", ["'70000:80'", "'0:80'", "{target: 65536}"])
def test_port_out_of_range(port):
    with pytest.raises(ValidationError):
        ComposeParser().parse_from_string(f"services:\n  web:\n    image: nginx\n    ports:\n      - {port}\n")
