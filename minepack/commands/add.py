"""
add 命令
"""

from typing import Optional

import click

from minepack.commands.common import (
    choose,
    choose_many,
    describe_hit,
    load_pack,
    make_resolver,
    run,
)
from minepack.models import ResultKind
from minepack.operations import AddOperation, DependencyPolicy


def ask_policy() -> DependencyPolicy:
    answer = click.prompt(
        "添加缺失的依赖？[a] 全部 / [n] 不添加 / [s] 选择",
        type=click.Choice(["a", "n", "s"]),
        default="a",
    )
    return {"a": DependencyPolicy.ALL, "n": DependencyPolicy.NONE, "s": DependencyPolicy.SELECT}[
        answer
    ]


async def add_content(app, query: str, policy: Optional[DependencyPolicy]) -> None:
    pack = await load_pack(app)
    async with app.client() as client:
        operation = AddOperation(pack, make_resolver(app, client, pack))

        result = await operation.run(query)
        if result.kind is ResultKind.AMBIGUOUS:
            index = choose(result.candidates, describe_hit, f"找到多个与 {query} 匹配的结果:")
            if index is None:
                click.echo("已取消")
                return
            result = await operation.run(query, index)

        if result.kind is ResultKind.DUPLICATE:
            raise click.ClickException(f"{result.existing.name} 已在整合包中")
        if not result.ok:
            raise click.ClickException(result.message or result.kind.value)

        stub = result.stub
        click.echo(f"已添加 {stub.name} ({stub.download.path})")
        if not result.missing:
            return

        click.echo(f"{stub.name} 有 {len(result.missing)} 个缺失的必需依赖")
        if policy is None:
            policy = ask_policy()

        if policy is DependencyPolicy.SELECT:
            chosen = choose_many(result.missing, str, "选择要添加的依赖:")
            selected = [result.missing.index(identifier) for identifier in chosen]
        else:
            selected = None
        identifiers = operation.select_dependencies(result.missing, policy, selected)

        for outcome in await operation.add_dependencies(identifiers):
            if outcome.ok:
                click.echo(f"  已添加依赖 {outcome.stub.name}")
            elif outcome.kind is ResultKind.DUPLICATE:
                click.echo(f"  依赖 {outcome.identifier} 已存在")
            else:
                click.echo(f"  无法添加依赖 {outcome.identifier}: {outcome.message}", err=True)


@click.command("add")
@click.argument("query")
@click.option(
    "--all-deps",
    "policy",
    flag_value=DependencyPolicy.ALL.value,
    help="添加全部缺失的依赖",
)
@click.option(
    "--no-deps",
    "policy",
    flag_value=DependencyPolicy.NONE.value,
    help="不添加依赖",
)
@click.option(
    "--choose-deps",
    "policy",
    flag_value=DependencyPolicy.SELECT.value,
    help="逐个选择要添加的依赖",
)
@click.pass_obj
def add_command(app, query: str, policy: Optional[str]):
    """添加模组、资源包或光影（名称、slug、ID 或 Modrinth 链接）"""
    run(add_content(app, query, DependencyPolicy(policy) if policy else None))


def register(registry) -> None:
    registry.register(add_command)
