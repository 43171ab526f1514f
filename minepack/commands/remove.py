"""
remove 命令
"""

from typing import Optional

import click

from minepack.commands.common import choose_many, describe_stub, load_pack, locate, run
from minepack.models import ResultKind, Stub
from minepack.operations import DependentsChoice, RemoveOperation


def ask_dependents_choice(target: Stub, dependents) -> DependentsChoice:
    click.echo(f"以下内容依赖 {target.name}:")
    for stub in dependents:
        click.echo(f"  - {describe_stub(stub)}")
    answer = click.prompt(
        "同时移除它们？[n] 都不移除 / [s] 选择 / [a] 全部 / [c] 取消",
        type=click.Choice(["n", "s", "a", "c"]),
        default="n",
    )
    return {
        "n": DependentsChoice.NONE,
        "s": DependentsChoice.SOME,
        "a": DependentsChoice.ALL,
        "c": DependentsChoice.CANCEL,
    }[answer]


async def remove_content(
    app, query: str, cascade: Optional[str], orphans: Optional[bool]
) -> None:
    pack = await load_pack(app)
    operation = RemoveOperation(pack)

    target = await locate(operation, query)
    if target is None:
        click.echo("已取消")
        return

    dependents = await operation.dependents(target)
    selected = []
    if not dependents:
        choice = DependentsChoice.NONE
    elif cascade is not None:
        choice = DependentsChoice(cascade)
    else:
        choice = ask_dependents_choice(target, dependents)
    if choice is DependentsChoice.SOME:
        selected = choose_many(dependents, describe_stub, "选择要一并移除的内容:")

    report = await operation.remove(target, choice, selected)
    if report.kind is ResultKind.CANCELLED:
        click.echo("已取消，没有做任何修改")
        return
    if not report.target_removed:
        raise click.ClickException(f"无法移除 {target.name}: {report.target_error}")

    click.echo(f"已移除 {target.name}")
    for outcome in report.cascade:
        if outcome.ok:
            click.echo(f"  已移除 {outcome.stub.name}")
    for outcome in report.failed_cascade:
        click.echo(f"  无法移除 {outcome.stub.name}: {outcome.message}", err=True)

    if not report.orphans:
        return
    if orphans is None:
        chosen = choose_many(report.orphans, describe_stub, "以下依赖已不再被使用，选择要移除的:")
    else:
        chosen = list(report.orphans) if orphans else []
        if not orphans:
            names = ", ".join(stub.name for stub in report.orphans)
            click.echo(f"保留不再被使用的依赖: {names}")

    for outcome in await operation.remove_orphans(chosen):
        if outcome.ok:
            click.echo(f"  已移除 {outcome.stub.name}")
        else:
            click.echo(f"  无法移除 {outcome.stub.name}: {outcome.message}", err=True)


@click.command("remove")
@click.argument("query")
@click.option(
    "--dependents",
    "cascade",
    type=click.Choice([DependentsChoice.NONE.value, DependentsChoice.ALL.value, DependentsChoice.CANCEL.value]),
    help="如何处理依赖它的内容（默认询问）",
)
@click.option(
    "--orphans/--keep-orphans",
    default=None,
    help="是否移除不再被使用的依赖（默认询问）",
)
@click.pass_obj
def remove_command(app, query: str, cascade: Optional[str], orphans: Optional[bool]):
    """从整合包中移除内容"""
    run(remove_content(app, query, cascade, orphans))


def register(registry) -> None:
    registry.register(remove_command)
