"""
list 命令
"""

from typing import Optional

import click

from minepack.commands.common import describe_stub, load_pack, run
from minepack.models import ContentType


async def list_content(app, content_type: Optional[str], show_url: bool) -> None:
    pack = await load_pack(app)
    stubs = await pack.stubs()
    if content_type:
        stubs = [stub for stub in stubs if stub.type is ContentType(content_type)]

    if not stubs:
        click.echo("整合包中还没有内容")
        return

    for stub in sorted(stubs, key=lambda s: s.name.lower()):
        env = stub.environments
        click.echo(f"{describe_stub(stub)} client: {env.client.value}, server: {env.server.value}")
        if show_url:
            click.echo(f"    {stub.download.url}")
    click.echo(f"共 {len(stubs)} 个内容")


@click.command("list")
@click.option(
    "--type",
    "content_type",
    type=click.Choice([t.value for t in ContentType]),
    help="只显示某种类型",
)
@click.option("--url", "show_url", is_flag=True, help="显示下载链接")
@click.pass_obj
def list_command(app, content_type: Optional[str], show_url: bool):
    """列出整合包中的内容"""
    run(list_content(app, content_type, show_url))


def register(registry) -> None:
    registry.register(list_command)
