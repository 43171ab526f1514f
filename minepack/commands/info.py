"""
pack 命令
"""

import click

from minepack.commands.common import load_pack, run
from minepack.utils import format_size


async def show_pack(app) -> None:
    pack = await load_pack(app)
    stubs = await pack.stubs()
    descriptor = pack.descriptor
    modloader = descriptor.modloader

    click.echo(f"{click.style(descriptor.name, bold=True)} {descriptor.version}")
    click.echo(f"作者: {descriptor.author}")
    if descriptor.description:
        click.echo(f"简介: {descriptor.description}")
    click.echo(f"Minecraft: {descriptor.game_version}")
    click.echo(f"{modloader.name.friendly_name}: {modloader.version or '未指定'}")
    click.echo(f"内容: {len(stubs)} 个，共 {format_size(sum(s.download.size for s in stubs))}")


@click.command("pack")
@click.pass_obj
def pack_command(app):
    """显示整合包信息"""
    run(show_pack(app))


def register(registry) -> None:
    registry.register(pack_command)
