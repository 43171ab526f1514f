"""
map 命令

显示依赖图：每个被依赖的项目及依赖它的内容，最后是独立的内容。
"""

import click

from minepack.commands.common import describe_stub, load_pack, run
from minepack.services import build_dependency_map


async def show_map(app) -> None:
    pack = await load_pack(app)
    stubs = await pack.stubs()
    dependency_map = build_dependency_map(stubs)

    involved = set()
    for identifier, dependents in dependency_map.items():
        match = next((stub for stub in stubs if stub.matches_identifier(identifier)), None)
        if match is None:
            click.echo(f"{identifier} {click.style('[missing stub]', fg='red')}")
        else:
            click.echo(describe_stub(match))
            involved.add(match.project_id)
        for stub in dependents:
            click.echo(f"  <- {stub.name}")
            involved.add(stub.project_id)

    standalone = [stub for stub in stubs if stub.project_id not in involved]
    if standalone:
        click.echo("独立内容:")
        for stub in standalone:
            click.echo(f"  {describe_stub(stub)}")


@click.command("map")
@click.pass_obj
def map_command(app):
    """显示依赖关系"""
    run(show_map(app))


def register(registry) -> None:
    registry.register(map_command)
