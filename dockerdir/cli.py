import logging
import sys
from pathlib import Path

import click

from dockerdir import __version__
from dockerdir.credentials import DEFAULT_PROBE_TIMEOUT, CredentialHelperChecker
from dockerdir.errors import DockerDirError
from dockerdir.manager import DockerDirManager


def get_manager(ctx) -> DockerDirManager:
    """Build a manager from the group options"""
    opts = ctx.obj
    return DockerDirManager(opts['docker_dir'], checker=CredentialHelperChecker(timeout=opts['helper_timeout']))


def run(fn, *args, **kwargs):
    """Call fn, turning our own errors into a clean CLI failure"""
    try:
        return fn(*args, **kwargs)
    except DockerDirError as ex:
        raise click.ClickException(str(ex))


@click.group()
@click.version_option(version=__version__)
@click.option('--docker-dir', type=click.Path(file_okay=False, path_type=Path), envvar='DOCKER_CONFIG',
              help='Docker CLI config directory (default: ~/.docker)')
@click.option('--helper-timeout', type=float, default=DEFAULT_PROBE_TIMEOUT, show_default=True,
              help='Seconds to wait for a credential helper probe')
@click.option('--verbose', '-v', is_flag=True, help='Show debug logging')
@click.pass_context
def cli(ctx, docker_dir, helper_timeout, verbose):
    """dockerdir - keep the docker CLI pointed at a working context and credential store"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
    )
    ctx.obj = {'docker_dir': docker_dir, 'helper_timeout': helper_timeout}


@cli.command()
@click.argument('context_name', required=False)
@click.pass_context
def socket(ctx, context_name):
    """Print the docker socket used by a context (default: the current one)"""
    manager = get_manager(ctx)
    if context_name is None:
        context_name = run(manager.config_storage.read).current_context
    click.echo(run(manager.get_current_docker_socket, context_name))


@cli.command()
@click.option('--owns-default-socket', is_flag=True, help='We control /var/run/docker.sock')
@click.pass_context
def context(ctx, owns_default_socket):
    """Print the context docker should be using"""
    manager = get_manager(ctx)
    current = run(manager.config_storage.read).current_context
    desired = run(manager.get_desired_docker_context, owns_default_socket, current)
    click.echo(desired or 'default')


@cli.command()
@click.option('--owns-default-socket', is_flag=True, help='We control /var/run/docker.sock')
@click.option('--socket', 'socket_path', help='Path to our docker socket')
@click.option('--kubernetes', 'kubernetes_endpoint', help='Kubernetes API endpoint for our context')
@click.pass_context
def ensure(ctx, owns_default_socket, socket_path, kubernetes_endpoint):
    """Reconcile config.json and our docker context"""
    manager = get_manager(ctx)
    written = run(manager.ensure_docker_config, owns_default_socket, socket_path, kubernetes_endpoint)
    if written:
        click.echo(f"Updated {manager.config_storage.config_path}")
    else:
        click.echo("Docker config not modified")


@cli.command()
@click.pass_context
def clear(ctx):
    """Remove our docker context (factory reset)"""
    manager = get_manager(ctx)
    errors = manager.clear_docker_context()
    if errors:
        click.echo(f"Warning: docker context {manager.context_name} only partly cleared:", err=True)
        for ex in errors:
            click.echo(f"  {ex}", err=True)
    else:
        click.echo(f"Cleared docker context {manager.context_name}")


@cli.command('creds-store')
@click.pass_context
def creds_store(ctx):
    """Print the native credential store for this platform"""
    click.echo(run(get_manager(ctx).get_default_docker_creds_store))


@cli.command('check-helper')
@click.argument('helper_name')
@click.pass_context
def check_helper(ctx, helper_name):
    """Check whether docker-credential-HELPER_NAME works"""
    if get_manager(ctx).cred_helper_working(helper_name):
        click.echo(f"docker-credential-{helper_name} is working")
    else:
        click.echo(f"docker-credential-{helper_name} is not functional")
        ctx.exit(1)


if __name__ == '__main__':
    cli()
