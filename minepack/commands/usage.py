"""
help 命令
"""

from typing import Optional

import click


@click.command("help")
@click.argument("command_name", required=False)
@click.pass_context
def help_command(ctx: click.Context, command_name: Optional[str]):
    """显示命令帮助"""
    group_ctx = ctx.parent
    if command_name is None:
        click.echo(group_ctx.get_help())
        return

    command = group_ctx.command.get_command(group_ctx, command_name)
    if command is None:
        raise click.UsageError(f"未知命令: {command_name}", ctx=group_ctx)

    with click.Context(command, info_name=command_name, parent=group_ctx) as sub_ctx:
        click.echo(command.get_help(sub_ctx))


def register(registry) -> None:
    registry.register(help_command)
