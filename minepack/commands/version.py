"""
version 命令
"""

import click

from minepack import __version__


@click.command("version")
def version_command():
    """显示版本"""
    click.echo(f"minepack {__version__}")


def register(registry) -> None:
    registry.register(version_command)
