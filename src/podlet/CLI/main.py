"""
Command Line Interface for Podlet.
"""
import json
import logging
import os
import click
import yaml
from pydantic import ValidationError
from ..MODELS.quadlet_type import QuadletType
from ..SERVICES.podlet_service import PodletService, ProviderContainerConnectionIdentifierInfo
from ..SERVICES.telemetry import LoggingTelemetry
from ..errors import PodletError

LOCAL_CONNECTION = ProviderContainerConnectionIdentifierInfo(provider_id="local", name="local")


class InspectFiles:
    """
    Serves inspect records from JSON files saved with `podman inspect`.
    """
    ENGINE_ID = "local"

    def __init__(self, container_path=None, image_path=None):
        self.container_path = container_path
        self.image_path = image_path

    @staticmethod
    def _load(path):
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        # podman inspect prints a list, even for a single resource
        if isinstance(data, list):
            if len(data) != 1:
                raise click.ClickException(f"{path} must contain exactly one inspect record")
            data = data[0]
        return data

    def get_engine_id(self, connection):
        return self.ENGINE_ID

    def inspect_container(self, engine_id, container_id):
        return self._load(self.container_path)

    def inspect_image(self, engine_id, image_id):
        return self._load(self.image_path)


def _run(call):
    """
    Runs a service call, turning expected failures into CLI errors.
    """
    try:
        return call()
    except (PodletError, ValidationError, yaml.YAMLError, json.JSONDecodeError, OSError) as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, verbose):
    """
    Podlet - Quadlet generator.

    Generates systemd Quadlet units from podman inspect output and
    kube-play manifests from compose files.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj['telemetry'] = LoggingTelemetry()


@cli.group()
def generate():
    """Generate a Quadlet unit from inspect output."""


@generate.command()
@click.option('--container', '-c', 'container_file', required=True,
              type=click.Path(exists=True, dir_okay=False), help='Container inspect JSON')
@click.option('--image', '-i', 'image_file', required=True,
              type=click.Path(exists=True, dir_okay=False), help='Image inspect JSON')
@click.option('--wanted-by', default=None, help='Start on boot with this target, e.g. default.target')
@click.option('--output', '-o', type=click.File('w'), default='-', help='Output file')
@click.pass_context
def container(ctx, container_file, image_file, wanted_by, output):
    """Generate a .container unit."""
    files = InspectFiles(container_file, image_file)
    service = PodletService(files, files, ctx.obj['telemetry'])
    options = {'type': QuadletType.CONTAINER.value}
    if wanted_by:
        options['wantedBy'] = wanted_by

    content = _run(lambda: service.generate(LOCAL_CONNECTION, QuadletType.CONTAINER, options, container_file))
    output.write(content)


@generate.command()
@click.option('--image', '-i', 'image_file', required=True,
              type=click.Path(exists=True, dir_okay=False), help='Image inspect JSON')
@click.option('--output', '-o', type=click.File('w'), default='-', help='Output file')
@click.pass_context
def image(ctx, image_file, output):
    """Generate a .image unit."""
    files = InspectFiles(image_path=image_file)
    service = PodletService(files, files, ctx.obj['telemetry'])
    options = {'type': QuadletType.IMAGE.value}

    content = _run(lambda: service.generate(LOCAL_CONNECTION, QuadletType.IMAGE, options, image_file))
    output.write(content)


@cli.command()
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
@click.option('--type', '-t', 'target', type=click.Choice(['kube', 'container', 'pod'], case_sensitive=False),
              default='kube', help='Target type')
@click.option('--env', '-e', 'env', multiple=True, help='KEY=VALUE available to ${VAR} placeholders')
@click.option('--host-env', is_flag=True, help='Make the current environment available to ${VAR} placeholders')
@click.option('--output', '-o', type=click.File('w'), default='-', help='Output file')
@click.pass_context
def compose(ctx, file, target, env, host_env, output):
    """Convert a compose file."""
    context = dict(os.environ) if host_env else {}
    for entry in env:
        if '=' not in entry:
            raise click.BadParameter(f"expected KEY=VALUE, got {entry}", param_hint='--env')
        key, value = entry.split('=', 1)
        context[key] = value

    files = InspectFiles()
    service = PodletService(files, files, ctx.obj['telemetry'], compose_context=context)
    content = _run(lambda: service.compose(file, QuadletType(target.upper())))
    output.write(content)


def main():
    """
    Main entry point for the CLI.
    """
    cli(obj={})


if __name__ == '__main__':
    main()
