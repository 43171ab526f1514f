"""
init 命令

创建 pack.mp.json、stubs/ 和 overrides/。
"""

from typing import Optional

import click

from minepack.commands.common import run
from minepack.exceptions import ProjectError
from minepack.models import ModLoader, Modloader, PackDescriptor
from minepack.services import LoaderVersionService
from minepack.storage import Pack

LOADER_CHOICES = [loader.value for loader in ModLoader]


async def init_pack(
    app,
    name: str,
    author: str,
    description: str,
    game_version: str,
    loader: str,
    loader_version: Optional[str],
    version: str,
    force: bool,
) -> Pack:
    modloader = ModLoader(loader)
    if not loader_version:
        async with app.client() as client:
            loader_version = await LoaderVersionService(client).latest(modloader, game_version)
        if loader_version:
            click.echo(f"使用 {modloader.friendly_name} {loader_version}")
        else:
            loader_version = click.prompt(
                f"{modloader.friendly_name} 版本", default="", show_default=False
            )

    descriptor = PackDescriptor(
        name=name,
        author=author,
        description=description,
        game_version=game_version,
        modloader=Modloader(name=modloader, version=loader_version),
        version=version,
    )
    try:
        return await Pack.create(app.root, descriptor, force=force)
    except ProjectError as e:
        raise click.ClickException(f"{e.message}，使用 --force 覆盖")


@click.command("init")
@click.option("--name", prompt="整合包名称", help="整合包名称")
@click.option("--author", prompt="作者", help="作者")
@click.option("--description", default="", help="简介")
@click.option("--game-version", prompt="Minecraft 版本", help="Minecraft 版本")
@click.option(
    "--loader",
    type=click.Choice(LOADER_CHOICES),
    prompt="模组加载器",
    help="模组加载器",
)
@click.option("--loader-version", help="加载器版本（默认获取最新版本）")
@click.option("--version", "pack_version", default="1.0.0", show_default=True, help="整合包版本")
@click.option("--force", is_flag=True, help="覆盖已有的 pack.mp.json")
@click.pass_obj
def init_command(
    app,
    name: str,
    author: str,
    description: str,
    game_version: str,
    loader: str,
    loader_version: Optional[str],
    pack_version: str,
    force: bool,
):
    """初始化整合包项目"""
    pack = run(
        init_pack(
            app,
            name,
            author,
            description,
            game_version,
            loader,
            loader_version,
            pack_version,
            force,
        )
    )
    click.echo(f"已在 {pack.root} 初始化 {pack.descriptor.name}")


def register(registry) -> None:
    registry.register(init_command)
