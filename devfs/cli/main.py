# SPDX-FileCopyrightText: 2026 - Canonical Ltd
# SPDX-License-Identifier: Apache-2.0

import click

from devfs import __version__
from devfs.fileserver import server
from devfs.fileserver.utils import ConfigurationError
from devfs.log import register_options, setup_logging

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group("devfs", context_settings=CONTEXT_SETTINGS)
@click.option("-v", "--verbose", is_flag=True, help="Increase output verbosity")
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    """Serve filesystem reads to browser-side development tools."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@click.command("serve")
@click.option(
    "--config-file",
    "config_files",
    multiple=True,
    type=click.Path(exists=True, dir_okay=False),
    help="oslo.config file to load, may be repeated",
)
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False),
    help="Directory request paths are resolved against",
)
@click.option("--host", help="Listen address")
@click.option("--port", type=click.IntRange(min=1), help="Preferred listen port")
@click.pass_context
def serve(ctx: click.Context, config_files, root, host, port):
    """Run the file server in the foreground."""
    conf = server.CONF
    register_options(conf)
    conf(
        args=[],
        project="devfs",
        prog="devfs",
        version=__version__,
        default_config_files=list(config_files),
    )
    setup_logging(conf, verbose=ctx.obj.get("verbose", False))

    for name, value in (("root_dir", root), ("host", host), ("port", port)):
        if value is not None:
            conf.set_override(name, value, group="fileserver")

    try:
        server.serve(conf)
    except ConfigurationError as exc:
        raise click.ClickException(str(exc))


def main():
    """Register commands and run the CLI."""
    cli.add_command(serve)

    cli(obj={})


if __name__ == "__main__":
    main()
