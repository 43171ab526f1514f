"""
search 命令

在项目目录中按整合包的游戏版本和加载器过滤，否则不加约束。
"""

from typing import Optional

import click

from minepack.commands.common import load_pack, run
from minepack.exceptions import APIError
from minepack.storage import Pack


async def search_registry(app, query: str, limit: Optional[int]) -> None:
    game_version, loader = "", ""
    if Pack.is_project(app.root):
        pack = await load_pack(app)
        game_version, loader = pack.game_version, pack.loader

    async with app.client() as client:
        try:
            hits = await client.search(query, game_version, loader, limit)
        except APIError as e:
            raise click.ClickException(f"搜索失败: {e}")

    if not hits:
        click.echo(f"没有找到与 {query} 匹配的内容")
        return

    for hit in hits:
        click.echo(f"{click.style(hit.title, bold=True)} ({hit.project_id}) [{hit.project_type}]")
        click.echo(f"    {hit.description}")
        click.echo(f"    {hit.page_url}")


@click.command("search")
@click.argument("query")
@click.option("--limit", type=click.IntRange(1, 100), help="结果数量")
@click.pass_obj
def search_command(app, query: str, limit: Optional[int]):
    """在 Modrinth 上搜索内容"""
    run(search_registry(app, query, limit))


def register(registry) -> None:
    registry.register(search_command)
