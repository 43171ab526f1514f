"""
query 命令
"""

import json

import click

from minepack.commands.common import load_pack, locate, run
from minepack.operations.base import StubOperation


async def query_content(app, query: str) -> None:
    pack = await load_pack(app)
    stub = await locate(StubOperation(pack), query)
    if stub is None:
        click.echo("已取消")
        return
    click.echo(json.dumps(stub.to_dict(), indent=2, ensure_ascii=False))


@click.command("query")
@click.argument("query")
@click.pass_obj
def query_command(app, query: str):
    """显示整合包中某个内容的存根"""
    run(query_content(app, query))


def register(registry) -> None:
    registry.register(query_command)
