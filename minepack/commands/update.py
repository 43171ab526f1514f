"""
update 命令
"""

from typing import Optional

import click

from minepack.commands.common import (
    choose,
    describe_hit,
    load_pack,
    locate,
    make_resolver,
    run,
)
from minepack.exceptions import StubWriteError
from minepack.models import ResultKind, UpdateOutcome
from minepack.operations import UpdateOperation


def ask_incompatible(outcome: UpdateOutcome) -> str:
    return click.prompt(
        f"{outcome.original.name} 没有兼容的版本。[i] 忽略 / [r] 移除",
        type=click.Choice(["i", "r"]),
        default="i",
    )


async def handle_incompatible(
    operation: UpdateOperation, outcome: UpdateOutcome, action: Optional[str]
) -> None:
    answer = action[0] if action else ask_incompatible(outcome)
    if answer == "r":
        try:
            await operation.remove_stub(outcome.original)
        except StubWriteError as e:
            click.echo(f"无法移除 {outcome.original.name}: {e.message}", err=True)
        else:
            click.echo(f"已移除 {outcome.original.name}")
    else:
        click.echo(f"保留 {outcome.original.name}")


def report(outcome: UpdateOutcome) -> None:
    if outcome.ok:
        if outcome.changed:
            click.echo(f"已更新 {outcome.stub.name} -> {outcome.stub.download.path}")
        else:
            click.echo(f"{outcome.stub.name} 已是最新")
    elif outcome.kind is ResultKind.AMBIGUOUS:
        click.echo(f"跳过 {outcome.original.name}: {outcome.message}", err=True)
    elif outcome.kind is not ResultKind.NO_COMPATIBLE_VERSION:
        click.echo(f"无法更新 {outcome.original.name}: {outcome.message}", err=True)


async def update_content(
    app, query: Optional[str], update_all: bool, on_incompatible: Optional[str]
) -> None:
    pack = await load_pack(app)
    async with app.client() as client:
        operation = UpdateOperation(
            pack,
            make_resolver(app, client, pack),
            max_concurrent=app.settings.max_concurrent,
        )

        if update_all:
            outcomes = await operation.update_all()
            for outcome in outcomes:
                report(outcome)
                if outcome.kind is ResultKind.NO_COMPATIBLE_VERSION:
                    await handle_incompatible(operation, outcome, on_incompatible)
            updated = sum(1 for outcome in outcomes if outcome.changed)
            click.echo(f"共更新 {updated} / {len(outcomes)} 个内容")
            return

        stub = await locate(operation, query)
        if stub is None:
            click.echo("已取消")
            return

        outcome = await operation.update_stub(stub)
        if outcome.kind is ResultKind.AMBIGUOUS and outcome.candidates:
            index = choose(outcome.candidates, describe_hit, f"{stub.slug} 有多个候选项:")
            if index is None:
                click.echo("已取消")
                return
            outcome = await operation.update_stub(stub, index)

        if outcome.kind is ResultKind.NO_COMPATIBLE_VERSION:
            await handle_incompatible(operation, outcome, on_incompatible)
            return
        report(outcome)
        if not outcome.ok:
            raise click.ClickException(f"无法更新 {stub.name}")


@click.command("update")
@click.argument("query", required=False)
@click.option("--all", "update_all", is_flag=True, help="更新所有内容")
@click.option(
    "--on-incompatible",
    type=click.Choice(["ignore", "remove"]),
    help="没有兼容版本时的处理方式（默认询问）",
)
@click.pass_obj
def update_command(
    app, query: Optional[str], update_all: bool, on_incompatible: Optional[str]
):
    """更新内容到最新的兼容版本"""
    if not query and not update_all:
        raise click.UsageError("需要指定要更新的内容，或使用 --all")
    if query and update_all:
        raise click.UsageError("--all 不能与具体内容同时使用")
    run(update_content(app, query, update_all, on_incompatible))


def register(registry) -> None:
    registry.register(update_command)
